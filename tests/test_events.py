"""
Unit tests for the event recorder and event export.
"""

import pandas as pd
import pytest

from hi3ex.events import Event, EventKind, EventRecorder, events_frame, render_events, write_events_csv


@pytest.mark.unit
class TestEvent:

    def test_render(self):
        assert Event.screen("STIGMATA_SCREEN").render() == "[STIGMATA_SCREEN]"
        assert Event.field("Valkyrie", "Fu Hua").render() == "Valkyrie=Fu Hua"
        assert Event.field("Stigmata", "").render() == "Stigmata="

    def test_events_are_immutable(self):
        e = Event.screen("LINEUP_SCREEN")
        with pytest.raises(Exception):
            e.tag = "OTHER"
        assert e.kind is EventKind.SCREEN
        assert e.value is None


@pytest.mark.unit
class TestEventRecorder:

    def test_drain_returns_emission_order_and_empties(self):
        rec = EventRecorder()
        evs = [Event.screen("STIGMATA_SCREEN"), Event.field("Valkyrie", "Kiana"),
               Event.field("Stigmata", "a"), Event.field("Stigmata", "a")]
        for e in evs:
            rec.record(e)
        assert len(rec) == 4
        assert rec.drain() == evs
        assert len(rec) == 0
        assert rec.drain() == []

    def test_render_events(self):
        lines = render_events([Event.screen("LINEUP_SCREEN"), Event.field("Stigmata", "x")])
        assert lines == ["[LINEUP_SCREEN]", "Stigmata=x"]


@pytest.mark.unit
class TestExport:

    def test_events_frame_columns(self):
        df = events_frame([Event.screen("LINEUP_SCREEN"), Event.field("Valkyrie", "Mei")])
        assert list(df.columns) == ["kind", "tag", "value"]
        assert df["kind"].tolist() == ["screen", "field"]

    def test_empty_events_frame(self):
        df = events_frame([])
        assert list(df.columns) == ["kind", "tag", "value"]
        assert len(df) == 0

    def test_write_csv(self, tmp_path):
        path = write_events_csv([Event.screen("STIGMATA_SCREEN"), Event.field("Valkyrie", "Fu Hua")],
                                tmp_path / "out" / "events.csv")
        df = pd.read_csv(path)
        assert df["tag"].tolist() == ["STIGMATA_SCREEN", "Valkyrie"]
        assert df["value"].tolist()[1] == "Fu Hua"
