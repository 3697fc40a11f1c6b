from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union
import json
import os
from pathlib import Path

from .errors import ConfigError
from .preprocess import validate_chain

Color = Tuple[int, int, int]

@dataclass(frozen=True)
class SamplePoint:
    x: int
    y: int
    color: Color  # (R, G, B)

@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    w: int
    h: int

@dataclass(frozen=True)
class Fingerprint:
    points: Tuple[SamplePoint, ...]
    threshold: float = 0.97

@dataclass(frozen=True)
class RoiSpec:
    name: str
    field: str
    rect: Rect
    chain: Tuple[str, ...] = ()

@dataclass(frozen=True)
class ScreenSpec:
    name: str
    tag: str
    fingerprint: Fingerprint
    rois: Tuple[RoiSpec, ...] = ()
    save_frames: bool = True

def _flag(name: str, default: bool) -> bool:
    v = os.environ.get(name)
    if v is None or v == "":
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")

@dataclass
class OcrConfig:
    lang: str = "eng"
    psm: int = 6  # single uniform block of text
    dpi: int = 300
    tessdata_dir: Optional[str] = None
    workers: int = 1

    @classmethod
    def from_env(cls) -> "OcrConfig":
        cfg = cls()
        cfg.lang = os.environ.get("HI3EX_LANG", cfg.lang)
        cfg.tessdata_dir = os.environ.get("TESSDATA_DIR") or None
        workers = os.environ.get("HI3EX_OCR_WORKERS")
        if workers:
            try:
                cfg.workers = max(1, int(workers))
            except ValueError as e:
                raise ConfigError(f"HI3EX_OCR_WORKERS must be an integer, got {workers!r}") from e
        return cfg

@dataclass
class RunConfig:
    width: int = 1920
    height: int = 1080
    output_dir: str = "Output"
    log_file: str = "Log.txt"
    save_frames: bool = True
    progress: bool = True
    screens_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "RunConfig":
        cfg = cls()
        cfg.output_dir = os.environ.get("HI3EX_OUTPUT_DIR", cfg.output_dir)
        cfg.log_file = os.environ.get("HI3EX_LOG_FILE", cfg.log_file)
        cfg.save_frames = _flag("HI3EX_SAVE_FRAMES", cfg.save_frames)
        cfg.progress = not _flag("HI3EX_NO_PROGRESS", not cfg.progress)
        cfg.screens_file = os.environ.get("HI3EX_SCREENS") or None
        return cfg

    def screens(self) -> List[ScreenSpec]:
        if self.screens_file:
            return load_screens(self.screens_file)
        return default_screens()

def _hex(s: str) -> Color:
    s = s.lstrip("#")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))

NAME_CHAIN = ("contrast", "invert", "grayscale")
LABEL_CHAIN = ("invert", "contrast")

def default_screens() -> List[ScreenSpec]:
    """Built-in layouts at 1920x1080, in evaluation priority order."""
    stigmata_fp = Fingerprint(points=(
        SamplePoint(120, 200, _hex("EE9AFF")),
        SamplePoint(990, 864, _hex("FFDD47")),
        SamplePoint(1350, 864, _hex("FFDD47")),
        SamplePoint(1710, 864, _hex("FFDD47")),
        SamplePoint(1280, 974, _hex("00C9FF")),
    ), threshold=0.97)
    stigmata_rois = [RoiSpec("valkyrie_name", "Valkyrie", Rect(188, 912, 484, 72), NAME_CHAIN)]
    for slot, x in (("top", 872), ("middle", 1232), ("bottom", 1592)):
        stigmata_rois.append(RoiSpec(f"stigmata_{slot}", "Stigmata", Rect(x, 550, 284, 188), LABEL_CHAIN))

    lineup_fp = Fingerprint(points=(
        SamplePoint(1762, 168, _hex("FFDD47")),
        SamplePoint(1762, 390, _hex("FFDD47")),
        SamplePoint(1762, 608, _hex("FFDD47")),
        SamplePoint(181, 97, _hex("FFDB48")),
        SamplePoint(1520, 986, _hex("005A7E")),
    ), threshold=0.97)

    return [
        ScreenSpec("stigmata", "STIGMATA_SCREEN", stigmata_fp, tuple(stigmata_rois)),
        ScreenSpec("lineup", "LINEUP_SCREEN", lineup_fp),
    ]

def _color(v: Union[str, Sequence[int]]) -> Color:
    if isinstance(v, str):
        if len(v.lstrip("#")) != 6:
            raise ConfigError(f"bad color {v!r}, expected #RRGGBB")
        return _hex(v)
    if len(v) != 3 or any(not 0 <= int(c) <= 255 for c in v):
        raise ConfigError(f"bad color {v!r}, expected three values in 0..255")
    return (int(v[0]), int(v[1]), int(v[2]))

def _point(raw) -> SamplePoint:
    if isinstance(raw, dict):
        return SamplePoint(int(raw["x"]), int(raw["y"]), _color(raw["color"]))
    x, y, color = raw
    return SamplePoint(int(x), int(y), _color(color))

def _roi(raw: dict) -> RoiSpec:
    x, y, w, h = (int(v) for v in raw["rect"])
    if w <= 0 or h <= 0:
        raise ConfigError(f"ROI {raw.get('name')!r} has an empty rect")
    chain = tuple(raw.get("chain", ()))
    try:
        validate_chain(chain)
    except ValueError as e:
        raise ConfigError(str(e)) from e
    return RoiSpec(name=raw["name"], field=raw.get("field", raw["name"]), rect=Rect(x, y, w, h), chain=chain)

def parse_screens(data: dict) -> List[ScreenSpec]:
    screens: List[ScreenSpec] = []
    try:
        for raw in data["screens"]:
            points = tuple(_point(p) for p in raw["points"])
            fp = Fingerprint(points=points, threshold=float(raw.get("threshold", 0.97)))
            screens.append(ScreenSpec(
                name=raw["name"],
                tag=raw.get("tag", raw["name"].upper() + "_SCREEN"),
                fingerprint=fp,
                rois=tuple(_roi(r) for r in raw.get("rois", ())),
                save_frames=bool(raw.get("save_frames", True)),
            ))
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid screen layout: {e!r}") from e

    names = [s.name for s in screens]
    if len(set(names)) != len(names):
        raise ConfigError(f"duplicate screen names in layout: {names}")
    return screens

def load_screens(path: Union[str, Path]) -> List[ScreenSpec]:
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read screen layout: {p}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Screen layout is not valid JSON: {p}: {e}") from e
    return parse_screens(data)

def check_layout(screens: Sequence[ScreenSpec], width: int, height: int) -> None:
    """Every sample point and ROI must fit inside the working resolution."""
    for s in screens:
        for p in s.fingerprint.points:
            if not (0 <= p.x < width and 0 <= p.y < height):
                raise ConfigError(f"{s.name}: sample point ({p.x},{p.y}) outside {width}x{height}")
        for roi in s.rois:
            r = roi.rect
            if r.x < 0 or r.y < 0 or r.x + r.w > width or r.y + r.h > height:
                raise ConfigError(f"{s.name}/{roi.name}: rect {r} outside {width}x{height}")
