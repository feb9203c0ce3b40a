"""
Pomodoro Timer — focus / short-break / long-break countdown state machine.

The timer is advanced by explicit tick() calls (one per second in
production, driven by a Ticker) so it can be exercised without real time
passing. A mode transition never starts the next countdown by itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Optional

from ..settings import TimerSettings, load_timer_settings, save_timer_settings
from ..storage.log_store import FOCUS_SESSIONS, LogStore
from ..storage.records import FocusSessionRecord

logger = logging.getLogger(__name__)


class TimerMode(str, Enum):
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


@dataclass
class TimerState:
    mode: TimerMode = TimerMode.FOCUS
    remaining_seconds: int = 0
    running: bool = False
    completed_sessions: int = 0


CompletionListener = Callable[[TimerMode, TimerMode], None]


class PomodoroTimer:
    """
    Usage:
        timer = PomodoroTimer(store)
        timer.start()
        for _ in range(1500):
            timer.tick()
        timer.state.mode          # TimerMode.SHORT_BREAK
    """

    def __init__(
        self,
        store: LogStore,
        settings: Optional[TimerSettings] = None,
        now: Callable[[], datetime] = lambda: datetime.now().astimezone(),
    ):
        self._store = store
        self._now = now
        self.settings = settings if settings is not None else load_timer_settings(store)
        self.state = TimerState(
            mode=TimerMode.FOCUS,
            remaining_seconds=self.duration_seconds(TimerMode.FOCUS),
        )
        self._listeners: List[CompletionListener] = []

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self) -> TimerState:
        if not self.state.running:
            self.state.running = True
            logger.info("Timer started: %s, %ds left", self.state.mode.value, self.state.remaining_seconds)
        return self.state

    def pause(self) -> TimerState:
        if self.state.running:
            self.state.running = False
            logger.info("Timer paused: %s, %ds left", self.state.mode.value, self.state.remaining_seconds)
        return self.state

    def reset(self) -> TimerState:
        self.state.running = False
        self.state.remaining_seconds = self.duration_seconds(self.state.mode)
        return self.state

    def switch_mode(self, target: Any) -> TimerState:
        """Force a transition to *target*; never counted as a completion."""
        try:
            mode = TimerMode(target)
        except ValueError:
            logger.warning("Ignoring switch to unknown timer mode %r", target)
            return self.state
        self.state.mode = mode
        self.state.running = False
        self.state.remaining_seconds = self.duration_seconds(mode)
        return self.state

    def update_settings(self, raw: Any) -> TimerSettings:
        """Replace and persist settings; an in-flight countdown keeps its remaining time."""
        self.settings = save_timer_settings(self._store, raw)
        return self.settings

    # ------------------------------------------------------------------
    # Countdown
    # ------------------------------------------------------------------

    def tick(self) -> Optional[TimerMode]:
        """
        Advance one second. Returns the mode that just finished when the
        countdown reaches zero, otherwise None.
        """
        if not self.state.running:
            return None
        self.state.remaining_seconds = max(0, self.state.remaining_seconds - 1)
        if self.state.remaining_seconds == 0:
            finished = self.state.mode
            self.on_complete()
            return finished
        return None

    def on_complete(self) -> TimerState:
        finished = self.state.mode
        if finished == TimerMode.FOCUS:
            record = FocusSessionRecord(
                date=self._now(),
                duration=self.settings.focus_duration,
                completed=True,
            )
            self._store.append(FOCUS_SESSIONS, record.to_dict())
            self.state.completed_sessions += 1
            if self.state.completed_sessions % self.settings.sessions_until_long_break == 0:
                next_mode = TimerMode.LONG_BREAK
            else:
                next_mode = TimerMode.SHORT_BREAK
        else:
            next_mode = TimerMode.FOCUS

        self.state.mode = next_mode
        self.state.running = False
        self.state.remaining_seconds = self.duration_seconds(next_mode)
        logger.info(
            "%s complete (%d focus sessions) → %s",
            finished.value, self.state.completed_sessions, next_mode.value,
        )

        for listener in self._listeners:
            try:
                listener(finished, next_mode)
            except Exception:
                logger.exception("Timer completion listener failed")
        return self.state

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def duration_seconds(self, mode: TimerMode) -> int:
        if mode == TimerMode.FOCUS:
            minutes = self.settings.focus_duration
        elif mode == TimerMode.SHORT_BREAK:
            minutes = self.settings.short_break_duration
        else:
            minutes = self.settings.long_break_duration
        return minutes * 60

    def progress(self) -> float:
        """Elapsed fraction of the current mode's full duration, clamped to [0, 1]."""
        total = self.duration_seconds(self.state.mode)
        if total <= 0:
            return 0.0
        fraction = (total - self.state.remaining_seconds) / total
        return max(0.0, min(fraction, 1.0))

    def is_focus_active(self) -> bool:
        return self.state.running and self.state.mode == TimerMode.FOCUS

    def register_listener(self, fn: CompletionListener) -> None:
        """Register a callback(finished_mode, next_mode) called on every completion."""
        self._listeners.append(fn)


def format_clock(seconds: int) -> str:
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"
