from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Tuple
import logging
import os

import pytesseract

from .config import OcrConfig
from .errors import OcrInitError
from .frame import Frame

logger = logging.getLogger(__name__)

_TESS_DEFAULT = r"C:\\Program Files\\Tesseract-OCR\\tesseract.exe"
_tess_cmd = os.environ.get("TESSERACT_CMD")
if _tess_cmd:
    pytesseract.pytesseract.tesseract_cmd = _tess_cmd
elif os.path.exists(_TESS_DEFAULT):
    pytesseract.pytesseract.tesseract_cmd = _TESS_DEFAULT

def normalize_text(text: str) -> str:
    return text.replace("\n", " ").strip()

class TesseractEngine:
    """Whole-block Tesseract recognition over prepared crops.

    Construction checks that the binary runs and the language data is
    installed, so a broken setup fails before any frame is decoded.
    """

    def __init__(self, cfg: OcrConfig):
        self.cfg = cfg
        try:
            self.version = str(pytesseract.get_tesseract_version())
        except pytesseract.TesseractNotFoundError as e:
            raise OcrInitError("Could not initialize tesseract: binary not found "
                               "(set TESSERACT_CMD to its location)") from e

        try:
            self.languages = list(pytesseract.get_languages(config=self._tessdata_arg()))
        except (pytesseract.TesseractError, OSError) as e:
            raise OcrInitError(f"Could not list tesseract languages: {e}") from e
        if cfg.lang not in self.languages:
            raise OcrInitError(f"Could not initialize tesseract: language {cfg.lang!r} not installed "
                               f"(available: {', '.join(self.languages) or 'none'})")

        self.config = " ".join(filter(None, [
            self._tessdata_arg(),
            f"--psm {cfg.psm}",
            "-c save_best_choices=T",
            f"-c user_defined_dpi={cfg.dpi}",
        ]))

    def _tessdata_arg(self) -> str:
        return f'--tessdata-dir "{self.cfg.tessdata_dir}"' if self.cfg.tessdata_dir else ""

    def recognize(self, frame: Frame) -> str:
        # BGR bytes go to tesseract as-is
        return pytesseract.image_to_string(frame.data, lang=self.cfg.lang, config=self.config)

def read_fields(engine, crops: Sequence[Tuple[str, Frame]], workers: int = 1) -> List[Tuple[str, str]]:
    """OCR every prepared crop; results keep the order of `crops`."""
    def _one(item: Tuple[str, Frame]) -> Tuple[str, str]:
        field, crop = item
        return field, normalize_text(engine.recognize(crop) or "")

    if workers <= 1 or len(crops) <= 1:
        return [_one(c) for c in crops]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_one, crops))
