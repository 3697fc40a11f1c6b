from __future__ import annotations
from typing import Dict, List, Optional, Sequence
import logging

from .config import ScreenSpec
from .fingerprint import match
from .frame import Frame

logger = logging.getLogger(__name__)

class ScreenDetectorBank:
    """Classifies a normalised frame as at most one known screen.

    Screens are evaluated in configured priority order. If several pass their
    threshold on the same frame the most confident one wins, and ties keep
    the earlier screen.
    """

    def __init__(self, screens: Sequence[ScreenSpec]):
        self.screens: List[ScreenSpec] = list(screens)

    def scores(self, frame: Frame) -> Dict[str, float]:
        return {s.name: match(frame, s.fingerprint) for s in self.screens}

    def classify(self, frame: Optional[Frame]) -> Optional[ScreenSpec]:
        if frame is None:
            return None
        best: Optional[ScreenSpec] = None
        best_score = -1.0
        for s in self.screens:
            score = match(frame, s.fingerprint)
            if score < s.fingerprint.threshold:
                continue
            if best is not None:
                logger.debug("screens %s and %s both matched (%.4f vs %.4f)",
                             best.name, s.name, best_score, score)
            if score > best_score:
                best, best_score = s, score
        return best
