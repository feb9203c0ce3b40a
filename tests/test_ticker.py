"""Tests for the asyncio Ticker."""

import asyncio

from flowstate.actions.ticker import Ticker


class TestTicker:
    async def test_ticks_until_callback_returns_false(self):
        calls = []

        def cb():
            calls.append(1)
            return len(calls) < 3

        ticker = Ticker("test", cb, interval_s=0.01)
        ticker.start()
        await asyncio.sleep(0.2)
        assert len(calls) == 3
        assert not ticker.running

    async def test_stop_cancels_immediately(self):
        calls = []
        ticker = Ticker("test", lambda: calls.append(1) or True, interval_s=0.01)
        ticker.start()
        await asyncio.sleep(0.05)
        ticker.stop()
        seen = len(calls)
        await asyncio.sleep(0.05)
        assert len(calls) == seen
        assert not ticker.running

    async def test_start_twice_runs_one_loop(self):
        calls = []
        ticker = Ticker("test", lambda: calls.append(1) or True, interval_s=0.05)
        ticker.start()
        ticker.start()
        await asyncio.sleep(0.12)
        ticker.stop()
        assert len(calls) <= 3

    async def test_callback_error_keeps_ticking(self):
        calls = []

        def cb():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first tick fails")
            return len(calls) < 3

        ticker = Ticker("test", cb, interval_s=0.01)
        ticker.start()
        await asyncio.sleep(0.2)
        assert len(calls) == 3
