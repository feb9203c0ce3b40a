"""
Notification Control — platform-aware desktop notifications.

Delivery is best effort: a missing tool, a denied permission or a timeout
just means no notification.
"""

from __future__ import annotations

import logging
import subprocess
import sys

from .pomodoro import TimerMode

logger = logging.getLogger(__name__)

COMPLETE_TITLE = "FlowState Timer Complete!"


def completion_message(finished: TimerMode) -> str:
    if finished == TimerMode.FOCUS:
        return "Time for a break!"
    return "Ready to focus again?"


class NotificationController:

    def notify(self, title: str, body: str) -> bool:
        """Show a desktop notification. Returns False if it could not be shown."""
        if sys.platform == "win32":
            return self._windows_notify(title, body)
        if sys.platform == "darwin":
            return self._macos_notify(title, body)
        return self._linux_notify(title, body)

    def timer_complete(self, finished: TimerMode) -> bool:
        return self.notify(COMPLETE_TITLE, completion_message(finished))

    # ------------------------------------------------------------------
    # Platform implementations
    # ------------------------------------------------------------------

    def _windows_notify(self, title: str, body: str) -> bool:
        script = (
            "[reflection.assembly]::loadwithpartialname('System.Windows.Forms') | Out-Null; "
            "$n = New-Object System.Windows.Forms.NotifyIcon; "
            "$n.Icon = [System.Drawing.SystemIcons]::Information; "
            f"$n.BalloonTipTitle = '{_ps_quote(title)}'; "
            f"$n.BalloonTipText = '{_ps_quote(body)}'; "
            "$n.Visible = $true; $n.ShowBalloonTip(5000)"
        )
        return self._run(["powershell", "-Command", script])

    def _macos_notify(self, title: str, body: str) -> bool:
        script = f'display notification "{_as_quote(body)}" with title "{_as_quote(title)}"'
        return self._run(["osascript", "-e", script])

    def _linux_notify(self, title: str, body: str) -> bool:
        return self._run(["notify-send", title, body])

    @staticmethod
    def _run(cmd: list[str]) -> bool:
        try:
            subprocess.run(cmd, check=True, capture_output=True, timeout=5)
            return True
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Notification not shown (%s): %s", cmd[0], e)
            return False


def _ps_quote(text: str) -> str:
    return text.replace("'", "''")


def _as_quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
