"""Tests for service wiring: completion notifications and auto-started breaks."""

import asyncio
import threading
import time
from unittest.mock import Mock

import pytest

from flowstate.actions.pomodoro import TimerMode
from flowstate.api.app import build_services
from flowstate.settings import TimerSettings, update_profile


@pytest.fixture
def notifier():
    return Mock()


@pytest.fixture
def services(store, notifier):
    s = build_services(store, notifier=notifier, tick_interval_s=0.01)
    s["timer"].settings = TimerSettings(focus_duration=1)
    s["timer"].reset()
    return s


def _finish_focus(timer):
    timer.start()
    for _ in range(60):
        timer.tick()


class TestCompletionListener:
    def test_notifies_when_enabled(self, services, notifier):
        _finish_focus(services["timer"])
        notifier.timer_complete.assert_called_once_with(TimerMode.FOCUS)

    def test_silent_when_notifications_off(self, services, notifier, store):
        update_profile(store, {"notifications": False})
        _finish_focus(services["timer"])
        notifier.timer_complete.assert_not_called()

    async def test_notification_does_not_block_the_loop(self, services, notifier):
        release = threading.Event()
        notifier.timer_complete.side_effect = lambda finished: release.wait(2)

        started = time.monotonic()
        _finish_focus(services["timer"])
        elapsed = time.monotonic() - started
        release.set()

        assert elapsed < 1
        await asyncio.sleep(0.05)
        notifier.timer_complete.assert_called_once_with(TimerMode.FOCUS)

    def test_break_not_auto_started_by_default(self, services):
        _finish_focus(services["timer"])
        assert services["timer"].state.mode == TimerMode.SHORT_BREAK
        assert services["timer"].state.running is False

    def test_auto_start_breaks(self, services, store):
        update_profile(store, {"autoStartBreaks": True})
        _finish_focus(services["timer"])
        assert services["timer"].state.mode == TimerMode.SHORT_BREAK
        assert services["timer"].state.running is True

    def test_auto_start_does_not_restart_focus_after_break(self, services, store):
        update_profile(store, {"autoStartBreaks": True})
        timer = services["timer"]
        _finish_focus(timer)
        for _ in range(timer.state.remaining_seconds):
            timer.tick()
        assert timer.state.mode == TimerMode.FOCUS
        assert timer.state.running is False


class TestTickers:
    def test_one_ticker_per_component(self, services):
        assert set(services["tickers"]) == {"timer", "monitor", "breaks"}

    async def test_timer_ticker_stops_with_timer(self, services):
        timer = services["timer"]
        timer.start()
        services["tickers"]["timer"].start()
        await asyncio.sleep(0.05)
        assert timer.state.remaining_seconds < 60
        timer.pause()
        await asyncio.sleep(0.05)
        assert not services["tickers"]["timer"].running
