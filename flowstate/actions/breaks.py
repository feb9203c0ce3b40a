"""
Micro-break Timer — counts down an active break and logs it on completion.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..storage.log_store import BREAK_HISTORY, LogStore
from ..storage.records import BreakRecord

logger = logging.getLogger(__name__)


@dataclass
class BreakState:
    active: bool = False
    break_type: str = ""
    remaining_seconds: int = 0
    duration_seconds: int = 0


class BreakTimer:

    def __init__(self, store: LogStore, clock: Callable[[], float] = time.time):
        self._store = store
        self._clock = clock
        self.state = BreakState()
        self.last_break_at: float = clock()

    def start(self, break_type: str, duration_seconds: int) -> BreakState:
        duration = max(1, int(duration_seconds))
        self.state = BreakState(
            active=True,
            break_type=break_type,
            remaining_seconds=duration,
            duration_seconds=duration,
        )
        return self.state

    def tick(self) -> Optional[BreakRecord]:
        """Advance one second; returns the logged record when the break ends."""
        if not self.state.active:
            return None
        self.state.remaining_seconds = max(0, self.state.remaining_seconds - 1)
        if self.state.remaining_seconds == 0:
            return self.complete()
        return None

    def complete(self) -> Optional[BreakRecord]:
        if not self.state.active:
            return None
        now = self._clock()
        record = BreakRecord(timestamp=now, type=self.state.break_type)
        self._store.append(BREAK_HISTORY, record.to_dict())
        logger.info("Break complete: %s", record.type)
        self.state = BreakState()
        self.last_break_at = now
        return record

    def cancel(self) -> BreakState:
        self.state = BreakState()
        return self.state

    def minutes_since_last_break(self) -> int:
        return int((self._clock() - self.last_break_at) // 60)
