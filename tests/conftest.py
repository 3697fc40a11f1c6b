"""
Pytest configuration and shared fixtures.

Frames are synthetic 1920x1080 BGR buffers; screen frames are black except
for the fingerprint sample points, which carry their exact reference colors.
"""

from typing import Dict, List, Optional

import numpy as np
import pytest

from hi3ex.config import ScreenSpec, default_screens
from hi3ex.frame import Frame

WIDTH, HEIGHT = 1920, 1080


def blank(width: int = WIDTH, height: int = HEIGHT) -> np.ndarray:
    return np.zeros((height, width, 3), dtype=np.uint8)


def paint(image: np.ndarray, screen: ScreenSpec) -> np.ndarray:
    """Write each sample point's reference color (stored RGB) as BGR."""
    for p in screen.fingerprint.points:
        r, g, b = p.color
        image[p.y, p.x] = (b, g, r)
    return image


class FakeOcr:
    """Stands in for TesseractEngine; returns queued texts in call order."""

    def __init__(self, texts: Optional[List[str]] = None, default: str = ""):
        self.texts = list(texts or [])
        self.default = default
        self.calls: List[Frame] = []

    def recognize(self, frame: Frame) -> str:
        self.calls.append(frame)
        if self.texts:
            return self.texts.pop(0)
        return self.default


@pytest.fixture
def screens() -> List[ScreenSpec]:
    return default_screens()


@pytest.fixture
def screens_by_name(screens) -> Dict[str, ScreenSpec]:
    return {s.name: s for s in screens}


@pytest.fixture
def stigmata(screens_by_name) -> ScreenSpec:
    return screens_by_name["stigmata"]


@pytest.fixture
def lineup(screens_by_name) -> ScreenSpec:
    return screens_by_name["lineup"]


@pytest.fixture
def black_image() -> np.ndarray:
    return blank()


@pytest.fixture
def stigmata_image(stigmata) -> np.ndarray:
    return paint(blank(), stigmata)


@pytest.fixture
def lineup_image(lineup) -> np.ndarray:
    return paint(blank(), lineup)


@pytest.fixture
def fake_ocr() -> FakeOcr:
    return FakeOcr()
