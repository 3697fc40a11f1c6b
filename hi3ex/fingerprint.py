from __future__ import annotations
import math

from .config import Fingerprint
from .frame import Frame

def _delta(observed: int, expected: int) -> float:
    # maps observed - expected from [-255, 255] onto [-1, 1]
    return 2.0 * (255 + observed - expected) / 510.0 - 1.0

def match(frame: Frame, fingerprint: Fingerprint) -> float:
    """Confidence in [0, 1] that `frame` shows the fingerprinted screen.

    Each sample point contributes the euclidean norm of its per-channel deltas
    divided by 3*N, so the summed deviation stays below 1 for any N.
    """
    n = len(fingerprint.points)
    if n == 0:
        return 1.0
    acc = 0.0
    for p in fingerprint.points:
        b, g, r = frame.pixel(p.x, p.y)
        er, eg, eb = p.color
        dr, dg, db = _delta(r, er), _delta(g, eg), _delta(b, eb)
        acc += math.sqrt(dr * dr + dg * dg + db * db) / (3.0 * n)
    return min(1.0, max(0.0, 1.0 - acc))

def matches(frame: Frame, fingerprint: Fingerprint) -> bool:
    return match(frame, fingerprint) >= fingerprint.threshold
