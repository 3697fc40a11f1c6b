from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Sequence

from .config import ScreenSpec

class TrackState(Enum):
    IDLE = "idle"
    ACTIVE = "active"

class TransitionTracker:
    """Edge detector for one screen type.

    `update` returns True only on IDLE -> ACTIVE. A single-frame dropout in a
    run of matches is not smoothed and yields a second rising edge.
    """

    def __init__(self, screen: ScreenSpec):
        self.screen = screen
        self.state = TrackState.IDLE
        self.occurrences = 0

    @property
    def active(self) -> bool:
        return self.state is TrackState.ACTIVE

    def update(self, classified: Optional[ScreenSpec]) -> bool:
        hit = classified is not None and classified.name == self.screen.name
        if not hit:
            self.state = TrackState.IDLE
            return False
        if self.state is TrackState.ACTIVE:
            return False
        self.state = TrackState.ACTIVE
        self.occurrences += 1
        return True

    def reset(self) -> None:
        self.state = TrackState.IDLE

class TrackerBank:
    def __init__(self, screens: Sequence[ScreenSpec]):
        self.trackers: Dict[str, TransitionTracker] = {s.name: TransitionTracker(s) for s in screens}

    def __getitem__(self, name: str) -> TransitionTracker:
        return self.trackers[name]

    def update(self, classified: Optional[ScreenSpec]) -> Optional[ScreenSpec]:
        entered: Optional[ScreenSpec] = None
        for t in self.trackers.values():
            if t.update(classified):
                entered = t.screen
        return entered

    def reset(self) -> None:
        for t in self.trackers.values():
            t.reset()
