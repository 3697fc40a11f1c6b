from __future__ import annotations
from typing import List, Tuple
import logging

import cv2
import numpy as np

from .config import ScreenSpec
from .frame import Frame
from .preprocess import apply_chain

logger = logging.getLogger(__name__)

class RegionExtractor:
    """Crops each ROI of a screen and prepares it for OCR.

    Crops are views into the frame and the transform chains run in place, so
    the frame's pixels inside the ROIs are modified. Extracting twice from
    the same frame applies the chains twice.
    """

    def extract(self, frame: Frame, screen: ScreenSpec) -> List[Tuple[str, Frame]]:
        out: List[Tuple[str, Frame]] = []
        for roi in screen.rois:
            crop = frame.crop(roi.rect)
            apply_chain(crop.data, roi.chain)
            logger.debug("prepared %s/%s %dx%d stride=%d", screen.name, roi.name,
                         crop.width, crop.height, crop.stride)
            out.append((roi.field, crop))
        return out

def draw_indicators(frame: Frame, screen: ScreenSpec, size: int = 32) -> np.ndarray:
    out = frame.data.copy()
    half = size // 2
    for p in screen.fingerprint.points:
        cv2.line(out, (max(0, p.x - half), p.y), (min(frame.width - 1, p.x + half), p.y), (0, 255, 0), 3)
        cv2.line(out, (p.x, max(0, p.y - half)), (p.x, min(frame.height - 1, p.y + half)), (0, 255, 0), 3)
    return out

def draw_rois(frame: Frame, screen: ScreenSpec) -> np.ndarray:
    out = frame.data.copy()
    for roi in screen.rois:
        r = roi.rect
        cv2.rectangle(out, (r.x, r.y), (r.x + r.w, r.y + r.h), (0, 255, 255), 2)
        cv2.putText(out, roi.name, (r.x, max(20, r.y - 10)), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 255), 2, cv2.LINE_AA)
    return out
