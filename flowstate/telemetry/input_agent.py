"""
Input Agent — background thread that counts mouse moves and key presses
with pynput and POSTs the counts to the local FlowState API, where they
feed the activity focus-score estimator.

Run standalone:
    python -m flowstate.telemetry.input_agent

Or import and start programmatically:
    from flowstate.telemetry.input_agent import InputAgent
    agent = InputAgent(); agent.start()
"""

from __future__ import annotations

import json
import logging
import threading
import time
import urllib.error
import urllib.request
from typing import Any, List

logger = logging.getLogger(__name__)


class InputAgent(threading.Thread):
    """
    Background thread that:
    1. Counts global mouse moves / key presses via pynput listeners
    2. Every `poll_interval_s` seconds, swaps the counters out
    3. POSTs non-empty counts to /activity/input
    """

    def __init__(
        self,
        engine_url: str = "http://127.0.0.1:8765",
        poll_interval_s: float = 1.0,
    ):
        super().__init__(daemon=True, name="FlowState-InputAgent")
        self.engine_url = engine_url.rstrip("/")
        self.poll_interval_s = poll_interval_s
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._mouse = 0
        self._keys = 0
        self._listeners: List[Any] = []

    # ------------------------------------------------------------------
    # Thread lifecycle
    # ------------------------------------------------------------------

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> None:
        self._start_listeners()
        try:
            while not self._stop_event.wait(self.poll_interval_s):
                self._flush()
            self._flush()                    # final flush on shutdown
        finally:
            for listener in self._listeners:
                listener.stop()

    def _start_listeners(self) -> None:
        from pynput import keyboard, mouse

        self._listeners = [
            mouse.Listener(on_move=self.on_mouse_move),
            keyboard.Listener(on_press=self.on_key_press),
        ]
        for listener in self._listeners:
            listener.start()
        logger.info("Input listeners started")

    # ------------------------------------------------------------------
    # Listener callbacks
    # ------------------------------------------------------------------

    def on_mouse_move(self, x: int, y: int) -> None:
        with self._lock:
            self._mouse += 1

    def on_key_press(self, key: Any) -> None:
        with self._lock:
            self._keys += 1

    def take_counts(self) -> tuple[int, int]:
        """Return and reset the counts accumulated since the last call."""
        with self._lock:
            counts = (self._mouse, self._keys)
            self._mouse = 0
            self._keys = 0
        return counts

    # ------------------------------------------------------------------
    # HTTP flush
    # ------------------------------------------------------------------

    def _flush(self) -> bool:
        mouse_moves, key_presses = self.take_counts()
        if not mouse_moves and not key_presses:
            return False
        try:
            payload = json.dumps({"mouse": mouse_moves, "keys": key_presses}).encode()
            req = urllib.request.Request(
                f"{self.engine_url}/activity/input",
                data=payload,
                headers={"Content-Type": "application/json"},
                method="POST",
            )
            with urllib.request.urlopen(req, timeout=3):
                pass
            return True
        except (urllib.error.URLError, OSError) as e:
            logger.debug("Engine unreachable, dropping counts: %s", e)
            return False


# ---------------------------------------------------------------------------
# Standalone entry point
# ---------------------------------------------------------------------------

def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="FlowState Input Agent")
    parser.add_argument("--url", default="http://127.0.0.1:8765", help="Engine API URL")
    parser.add_argument("--interval", type=float, default=1.0, help="Report interval (seconds)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    agent = InputAgent(engine_url=args.url, poll_interval_s=args.interval)
    agent.start()
    print(f"Input agent running (reporting every {args.interval}s → {args.url})")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("Stopping…")
        agent.stop()
        agent.join(timeout=5)


if __name__ == "__main__":
    main()
