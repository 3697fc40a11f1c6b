from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence
import logging

import cv2
import numpy as np
from tqdm import tqdm

from .config import RunConfig, ScreenSpec, check_layout
from .detector import ScreenDetectorBank
from .errors import VideoOpenError
from .events import Event, EventRecorder
from .frame import Frame, normalize_frame
from .ocr import read_fields
from .persistence import FrameSaver
from .roi import RegionExtractor
from .tracker import TrackerBank

logger = logging.getLogger(__name__)

def format_timestamp(ms: float) -> str:
    t = int(ms)
    millis = t % 1000; t //= 1000
    seconds = t % 60; t //= 60
    minutes = t % 60; t //= 60
    return f"{t}:{minutes:02d}:{seconds:02d}:{millis:03d}"

class VideoSource:
    """Sequential BGR frames from a video file, read once front to back."""

    def __init__(self, path: str):
        self.path = str(path)
        self.cap = cv2.VideoCapture(self.path)
        if not self.cap.isOpened():
            raise VideoOpenError(f"Could not open file {self.path}")
        self.fps = float(self.cap.get(cv2.CAP_PROP_FPS) or 0.0)
        self.frame_count = int(self.cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)

    @property
    def frame_index(self) -> int:
        return int(self.cap.get(cv2.CAP_PROP_POS_FRAMES))

    @property
    def position_ms(self) -> float:
        return float(self.cap.get(cv2.CAP_PROP_POS_MSEC))

    @property
    def timestamp(self) -> str:
        return format_timestamp(self.position_ms)

    def describe(self) -> str:
        return f"Frame number {self.frame_index} ({self.timestamp})"

    def __iter__(self) -> Iterator[np.ndarray]:
        while True:
            ok, frame = self.cap.read()
            if not ok or frame is None:
                break
            yield frame

    def release(self) -> None:
        self.cap.release()

    def __enter__(self) -> "VideoSource":
        return self

    def __exit__(self, *exc) -> None:
        self.release()

class ScreenPipeline:
    """Per-frame classify -> track -> extract -> OCR -> record."""

    def __init__(self, screens: Sequence[ScreenSpec], engine, recorder: Optional[EventRecorder] = None,
                 saver: Optional[FrameSaver] = None, width: int = 1920, height: int = 1080,
                 ocr_workers: int = 1):
        check_layout(screens, width, height)
        self.detector = ScreenDetectorBank(screens)
        self.trackers = TrackerBank(screens)
        self.extractor = RegionExtractor()
        self.engine = engine
        self.recorder = recorder if recorder is not None else EventRecorder()
        self.saver = saver
        self.width = width
        self.height = height
        self.ocr_workers = ocr_workers

        self.frames_seen = 0
        self.frames_skipped = 0
        self.entries = 0

    def process_frame(self, image: Optional[np.ndarray], source: Optional[VideoSource] = None) -> Optional[ScreenSpec]:
        self.frames_seen += 1
        frame = normalize_frame(image, self.width, self.height)
        if frame is None:
            self.frames_skipped += 1
            logger.debug("frame %d unusable, treating as no screen", self.frames_seen)

        screen = self.detector.classify(frame)
        entered = self.trackers.update(screen)
        if entered is not None:
            self._enter(entered, frame, source)
        return screen

    def _enter(self, screen: ScreenSpec, frame: Frame, source: Optional[VideoSource]) -> None:
        self.entries += 1
        where = source.describe() if source is not None else f"Frame {self.frames_seen}"
        logger.info("%s: %s screen", where, screen.name.capitalize())
        self.recorder.record(Event.screen(screen.tag))

        # saved before extraction, which rewrites ROI pixels in place
        if self.saver is not None and screen.save_frames:
            self.saver.save(screen, frame)

        crops = self.extractor.extract(frame, screen)
        for field, text in read_fields(self.engine, crops, self.ocr_workers):
            logger.info("%s: %s", field, text)
            self.recorder.record(Event.field(field, text))

@dataclass
class ScanResult:
    events: List[Event]
    frames_read: int
    frames_skipped: int
    entries: int

def process_video(video_path: str, screens: Sequence[ScreenSpec], engine, run_cfg: RunConfig,
                  ocr_workers: int = 1) -> ScanResult:
    with VideoSource(video_path) as src:
        logger.info("Streaming video file from %s", video_path)
        logger.info("Framerate: %d", int(src.fps))
        logger.info("Frame count: %d", src.frame_count)
        for s in screens:
            logger.info("%s screen threshold confidence value: %.6f", s.name.capitalize(), s.fingerprint.threshold)

        saver = FrameSaver(run_cfg.output_dir) if run_cfg.save_frames else None
        pipe = ScreenPipeline(screens, engine, saver=saver, width=run_cfg.width, height=run_cfg.height,
                              ocr_workers=ocr_workers)

        with tqdm(total=src.frame_count if src.frame_count > 0 else None, desc="Scanning",
                  unit="frame", disable=not run_cfg.progress) as pbar:
            for image in src:
                pipe.process_frame(image, source=src)
                pbar.update(1)

    return ScanResult(events=pipe.recorder.drain(), frames_read=pipe.frames_seen,
                      frames_skipped=pipe.frames_skipped, entries=pipe.entries)
