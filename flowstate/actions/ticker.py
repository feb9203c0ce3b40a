"""
Ticker — cancellable periodic callback on the running asyncio loop.

One Ticker drives one component (timer, activity monitor, break timer).
The callback returns True to keep ticking; a delayed tick is applied once,
with no catch-up.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Ticker:

    def __init__(self, name: str, callback: Callable[[], bool], interval_s: float = 1.0):
        self.name = name
        self.interval_s = interval_s
        self._callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Begin ticking on the current event loop; no-op if already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"ticker:{self.name}")

    def stop(self) -> None:
        """Cancel immediately; no further callbacks fire until start() is called again."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            try:
                keep_going = self._callback()
            except Exception:
                logger.exception("Ticker %s callback failed", self.name)
                keep_going = True
            if not keep_going:
                self._task = None
                return
