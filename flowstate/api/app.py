"""
FastAPI application — local FlowState focus-session API.
Runs on http://127.0.0.1:8765 by default.

The store and the services built on it live on app.state so that each call
to create_app() produces a fully independent instance with no shared
module-level globals. Pass a store to create_app() to inject one (tests use
a temp-path or in-memory store).
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..actions.breaks import BreakTimer
from ..actions.notifications import NotificationController
from ..actions.pomodoro import PomodoroTimer, TimerMode
from ..actions.ticker import Ticker
from ..config import config
from ..inference.focus_score import FocusMonitor
from ..settings import load_profile
from ..storage.log_store import LogStore, SQLiteLogStore

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Service wiring
# ---------------------------------------------------------------------------

def build_services(
    store: LogStore,
    notifier: Optional[NotificationController] = None,
    tick_interval_s: float = config.tick_interval_s,
) -> Dict[str, Any]:
    """Create the timer, monitor and break timer, plus one Ticker each."""
    timer = PomodoroTimer(store)
    monitor = FocusMonitor(store, idle_threshold_s=config.inactivity_threshold_s)
    breaks = BreakTimer(store)
    notifier = notifier if notifier is not None else NotificationController()

    def _notify(finished: TimerMode) -> None:
        # the notifier shells out; it never runs on the loop thread
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            notifier.timer_complete(finished)
            return
        loop.run_in_executor(None, notifier.timer_complete, finished)

    def _on_timer_complete(finished: TimerMode, next_mode: TimerMode) -> None:
        profile = load_profile(store)
        if profile["notifications"]:
            _notify(finished)
        if profile["autoStartBreaks"] and finished == TimerMode.FOCUS:
            timer.start()

    timer.register_listener(_on_timer_complete)

    def _timer_tick() -> bool:
        timer.tick()
        return timer.state.running

    def _monitor_tick() -> bool:
        monitor.tick()
        return monitor.active

    def _break_tick() -> bool:
        breaks.tick()
        return breaks.state.active

    return {
        "store": store,
        "timer": timer,
        "monitor": monitor,
        "breaks": breaks,
        "notifier": notifier,
        "tickers": {
            "timer": Ticker("timer", _timer_tick, tick_interval_s),
            "monitor": Ticker("monitor", _monitor_tick, tick_interval_s),
            "breaks": Ticker("breaks", _break_tick, tick_interval_s),
        },
    }


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(store: Optional[LogStore] = None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store if store is not None else SQLiteLogStore(
            config.data_dir / config.store_db
        )
        app.state.services = build_services(app.state.store)
        logger.info("FlowState engine ready (store: %s)", type(app.state.store).__name__)

        yield

        for ticker in app.state.services["tickers"].values():
            ticker.stop()
        monitor = app.state.services["monitor"]
        if monitor.active:
            monitor.stop()

    app = FastAPI(
        title="FlowState",
        description="Local-first focus timer, activity focus score and study analytics",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routers import activity, breaks, data, stats, timer

    app.include_router(timer.router)
    app.include_router(activity.router)
    app.include_router(breaks.router)
    app.include_router(stats.router)
    app.include_router(data.router)

    @app.get("/health")
    def health(request: Request):
        services = getattr(request.app.state, "services", None)
        return {
            "status": "ok",
            "version": VERSION,
            "timer_running": bool(services and services["timer"].state.running),
            "monitoring": bool(services and services["monitor"].active),
        }

    return app


app = create_app()
