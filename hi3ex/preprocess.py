from __future__ import annotations
from typing import Callable, Dict, Iterable
import numpy as np

# All transforms write into `img` in place. `img` is an (H, W, 3) BGR uint8
# array, usually a strided view into a larger frame.

def change_contrast(img: np.ndarray, contrast: float = 4.0) -> np.ndarray:
    v = np.float32(contrast) * (img.astype(np.float32) / np.float32(255.0) - np.float32(1.0)) + np.float32(1.0)
    out = ((v + np.float32(0.5)) * np.float32(255.0)).astype(np.int32)
    img[...] = np.clip(out, 0, 255).astype(np.uint8)
    return img

def invert(img: np.ndarray) -> np.ndarray:
    np.subtract(255, img, out=img)
    return img

def to_grayscale(img: np.ndarray) -> np.ndarray:
    b = img[..., 0].astype(np.float32)
    g = img[..., 1].astype(np.float32)
    r = img[..., 2].astype(np.float32)
    luma = np.float32(0.299) * r + np.float32(0.587) * g + np.float32(0.114) * b
    luma = np.clip(luma.astype(np.int32), 0, 255).astype(np.uint8)
    img[...] = luma[..., None]
    return img

STEPS: Dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "contrast": change_contrast,
    "invert": invert,
    "grayscale": to_grayscale,
}

def validate_chain(chain: Iterable[str]) -> None:
    for step in chain:
        if step not in STEPS:
            raise ValueError(f"unknown transform {step!r}, expected one of {sorted(STEPS)}")

def apply_chain(img: np.ndarray, chain: Iterable[str]) -> np.ndarray:
    for step in chain:
        try:
            fn = STEPS[step]
        except KeyError:
            raise ValueError(f"unknown transform {step!r}") from None
        fn(img)
    return img
