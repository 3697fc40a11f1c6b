class Hi3exError(Exception):
    pass

class ConfigError(Hi3exError):
    pass

class OcrInitError(Hi3exError):
    pass

class VideoOpenError(Hi3exError):
    pass
