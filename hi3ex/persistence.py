from __future__ import annotations
from pathlib import Path
from typing import Dict, Optional, Union
import logging

import cv2

from .config import ScreenSpec
from .frame import Frame

logger = logging.getLogger(__name__)

class FrameSaver:
    """Writes screen-entry frames as `<name>_frame_<n>.png`.

    Counters are per screen and start at 0. Write failures are logged and
    otherwise ignored.
    """

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)
        self.counters: Dict[str, int] = {}

    def save(self, screen: ScreenSpec, frame: Frame) -> Optional[Path]:
        n = self.counters.get(screen.name, 0)
        self.counters[screen.name] = n + 1
        path = self.output_dir / f"{screen.name}_frame_{n}.png"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            ok = cv2.imwrite(str(path), frame.data)
        except (OSError, cv2.error) as e:
            logger.warning("Could not save %s: %s", path, e)
            return None
        if not ok:
            logger.warning("Could not save %s", path)
            return None
        return path
