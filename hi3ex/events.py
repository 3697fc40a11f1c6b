from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pandas as pd

class EventKind(Enum):
    SCREEN = "screen"
    FIELD = "field"

@dataclass(frozen=True)
class Event:
    kind: EventKind
    tag: str
    value: Optional[str] = None

    @classmethod
    def screen(cls, tag: str) -> "Event":
        return cls(EventKind.SCREEN, tag)

    @classmethod
    def field(cls, tag: str, value: str) -> "Event":
        return cls(EventKind.FIELD, tag, value)

    def render(self) -> str:
        if self.kind is EventKind.SCREEN:
            return f"[{self.tag}]"
        return f"{self.tag}={self.value or ''}"

class EventRecorder:
    """Append-only event log, drained once when the stream ends."""

    def __init__(self):
        self._events: List[Event] = []

    def record(self, event: Event) -> None:
        self._events.append(event)

    def drain(self) -> List[Event]:
        events, self._events = self._events, []
        return events

    def __len__(self) -> int:
        return len(self._events)

def render_events(events: Iterable[Event]) -> List[str]:
    return [e.render() for e in events]

def events_frame(events: Iterable[Event]) -> pd.DataFrame:
    rows = [{"kind": e.kind.value, "tag": e.tag, "value": e.value} for e in events]
    return pd.DataFrame(rows, columns=["kind", "tag", "value"])

def write_events_csv(events: Iterable[Event], path: Union[str, Path]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    events_frame(events).to_csv(p, index=False)
    return p
