"""Tests for the micro-break timer."""

from flowstate.actions.breaks import BreakTimer
from flowstate.storage.log_store import BREAK_HISTORY


class TestBreakTimer:
    def test_countdown_logs_break_on_zero(self, store, clock):
        breaks = BreakTimer(store, clock=clock)
        breaks.start("Eye Rest", 3)
        assert breaks.tick() is None
        assert breaks.tick() is None
        record = breaks.tick()
        assert record is not None
        assert record.type == "Eye Rest"
        assert store.get(BREAK_HISTORY) == [{"timestamp": 1_700_000_000_000, "type": "Eye Rest"}]
        assert not breaks.state.active

    def test_complete_early(self, store, clock):
        breaks = BreakTimer(store, clock=clock)
        breaks.start("Stretch Break", 120)
        breaks.tick()
        breaks.complete()
        assert len(store.get(BREAK_HISTORY)) == 1

    def test_cancel_logs_nothing(self, store, clock):
        breaks = BreakTimer(store, clock=clock)
        breaks.start("Stretch Break", 120)
        breaks.cancel()
        assert breaks.complete() is None
        assert store.get(BREAK_HISTORY) == []

    def test_tick_without_break(self, store, clock):
        assert BreakTimer(store, clock=clock).tick() is None

    def test_minutes_since_last_break(self, store, clock):
        breaks = BreakTimer(store, clock=clock)
        clock.advance(20 * 60)
        assert breaks.minutes_since_last_break() == 20
        breaks.start("Eye Rest", 20)
        breaks.complete()
        assert breaks.minutes_since_last_break() == 0
