from __future__ import annotations
from typing import Optional, Tuple
import logging

import cv2
import numpy as np

from .config import Rect

logger = logging.getLogger(__name__)

class Frame:
    """A BGR uint8 pixel buffer with explicit geometry.

    `data` may be a strided view into a bigger buffer (see `crop`), in which
    case writes go through to the parent.
    """

    channels = 3

    def __init__(self, data: np.ndarray):
        if data.ndim != 3 or data.shape[2] != 3 or data.dtype != np.uint8:
            raise ValueError(f"expected (H, W, 3) uint8 buffer, got {data.shape} {data.dtype}")
        self.data = data

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def stride(self) -> int:
        return int(self.data.strides[0])

    @property
    def contiguous(self) -> bool:
        return bool(self.data.flags["C_CONTIGUOUS"])

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x},{y}) outside {self.width}x{self.height} frame")

    def offset(self, x: int, y: int) -> int:
        self._check(x, y)
        return y * self.stride + x * int(self.data.strides[1])

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        self._check(x, y)
        b, g, r = self.data[y, x]
        return int(b), int(g), int(r)

    def crop(self, rect: Rect) -> "Frame":
        if rect.w <= 0 or rect.h <= 0:
            raise ValueError(f"empty crop {rect}")
        if rect.x < 0 or rect.y < 0 or rect.x + rect.w > self.width or rect.y + rect.h > self.height:
            raise ValueError(f"crop {rect} outside {self.width}x{self.height} frame")
        return Frame(self.data[rect.y:rect.y + rect.h, rect.x:rect.x + rect.w])

    def __repr__(self) -> str:
        return f"Frame({self.width}x{self.height}, stride={self.stride})"

def normalize_frame(image: Optional[np.ndarray], width: int, height: int) -> Optional[Frame]:
    """Bring a decoded image to a contiguous BGR frame of the working size.

    Returns None when the buffer can't be turned into one.
    """
    if image is None or image.size == 0 or image.dtype != np.uint8:
        return None

    if image.ndim == 2:
        image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    elif image.ndim == 3 and image.shape[2] == 1:
        image = cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2BGR)
    elif image.ndim == 3 and image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    elif image.ndim != 3 or image.shape[2] != 3:
        return None

    if not image.flags["C_CONTIGUOUS"]:
        logger.debug("copying non-contiguous frame")
        image = np.ascontiguousarray(image)

    if image.shape[:2] != (height, width):
        image = cv2.resize(image, (width, height))

    return Frame(image)
