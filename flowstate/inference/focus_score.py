"""
Activity Focus-Score Estimator — turns raw input counts into a bounded
focus score in [0, 100] plus a distraction count.

Per tick (once a second while monitoring):
  activity_level = mouse_moves + 2 * key_presses
  5 < level < 100            → score + 1   (sustained moderate activity)
  level > 200                → score - 2   (frantic input, probably distracted)
  no input for > 30 s        → score - 3   (idle)
  otherwise                  → unchanged

Losing visibility (window/tab hidden) is handled as it happens:
distractions + 1, score - 5.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

from ..storage.log_store import ACTIVITY_SESSIONS, LogStore
from ..storage.records import ActivitySessionRecord

logger = logging.getLogger(__name__)

INITIAL_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 100

MODERATE_LOW = 5
MODERATE_HIGH = 100
EXCESSIVE = 200

REWARD = 1
EXCESS_PENALTY = 2
IDLE_PENALTY = 3
VISIBILITY_PENALTY = 5

HISTORY_SIZE = 20


@dataclass
class ActivitySample:
    """One tick's worth of input, kept for the live chart."""
    mouse_movements: int
    keystrokes: int
    focus_score: int
    distractions: int
    timestamp: float


@dataclass
class ActivityState:
    mouse_count: int = 0
    key_count: int = 0
    focus_score: int = INITIAL_SCORE
    distraction_count: int = 0
    last_activity_at: float = 0.0


def _clamp(score: int) -> int:
    return max(MIN_SCORE, min(score, MAX_SCORE))


def next_score(score: int, activity_level: int, idle_seconds: float, idle_threshold_s: float = 30.0) -> int:
    """Apply the per-tick rule once, in priority order."""
    if MODERATE_LOW < activity_level < MODERATE_HIGH:
        return _clamp(score + REWARD)
    if activity_level > EXCESSIVE:
        return _clamp(score - EXCESS_PENALTY)
    if idle_seconds > idle_threshold_s:
        return _clamp(score - IDLE_PENALTY)
    return _clamp(score)


def focus_status(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Moderate"
    return "Low"


class FocusMonitor:
    """
    Owns the ActivityState for one monitoring window at a time. Each window
    starts fresh; nothing carries over from the previous one.
    """

    def __init__(
        self,
        store: LogStore,
        clock: Callable[[], float] = time.time,
        idle_threshold_s: float = 30.0,
    ):
        self._store = store
        self._clock = clock
        self.idle_threshold_s = idle_threshold_s
        self.active = False
        self.started_at: Optional[float] = None
        self.state = ActivityState()
        self._history: Deque[ActivitySample] = deque(maxlen=HISTORY_SIZE)

    # ------------------------------------------------------------------
    # Monitoring window
    # ------------------------------------------------------------------

    def start(self) -> ActivityState:
        if self.active:
            return self.state
        now = self._clock()
        self.active = True
        self.started_at = now
        self.state = ActivityState(last_activity_at=now)
        self._history.clear()
        logger.info("Activity monitoring started")
        return self.state

    def stop(self) -> Optional[ActivitySessionRecord]:
        """End the window, log it, and reset. Returns None if not monitoring."""
        if not self.active or self.started_at is None:
            return None
        record = ActivitySessionRecord(
            start_time=self.started_at,
            end_time=self._clock(),
            final_focus_score=self.state.focus_score,
            total_distractions=self.state.distraction_count,
        )
        self._store.append(ACTIVITY_SESSIONS, record.to_dict())
        logger.info(
            "Activity monitoring stopped: score=%d distractions=%d",
            record.final_focus_score, record.total_distractions,
        )
        self.active = False
        self.started_at = None
        self.state = ActivityState()
        return record

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    def record_input(self, mouse: int = 0, keys: int = 0) -> None:
        if not self.active:
            return
        mouse = max(0, int(mouse))
        keys = max(0, int(keys))
        if mouse == 0 and keys == 0:
            return
        self.state.mouse_count += mouse
        self.state.key_count += keys
        self.state.last_activity_at = self._clock()

    def record_mouse_move(self) -> None:
        self.record_input(mouse=1)

    def record_key_press(self) -> None:
        self.record_input(keys=1)

    def visibility_lost(self) -> ActivityState:
        if self.active:
            self.state.distraction_count += 1
            self.state.focus_score = _clamp(self.state.focus_score - VISIBILITY_PENALTY)
            logger.debug("Visibility lost: distractions=%d", self.state.distraction_count)
        return self.state

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> ActivityState:
        if not self.active:
            return self.state
        now = self._clock()
        level = self.state.mouse_count + 2 * self.state.key_count
        idle_s = now - self.state.last_activity_at
        self.state.focus_score = next_score(
            self.state.focus_score, level, idle_s, self.idle_threshold_s
        )
        self._history.append(ActivitySample(
            mouse_movements=self.state.mouse_count,
            keystrokes=self.state.key_count,
            focus_score=self.state.focus_score,
            distractions=self.state.distraction_count,
            timestamp=now,
        ))
        self.state.mouse_count = 0
        self.state.key_count = 0
        return self.state

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    def recent(self) -> List[ActivitySample]:
        return list(self._history)

    def session_duration_seconds(self) -> int:
        if not self.active or self.started_at is None:
            return 0
        return int(self._clock() - self.started_at)
