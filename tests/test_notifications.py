"""Tests for desktop notifications."""

import subprocess
from unittest.mock import patch

import pytest

from flowstate.actions import notifications
from flowstate.actions.notifications import (
    COMPLETE_TITLE,
    NotificationController,
    completion_message,
)
from flowstate.actions.pomodoro import TimerMode


def test_completion_messages():
    assert completion_message(TimerMode.FOCUS) == "Time for a break!"
    assert completion_message(TimerMode.SHORT_BREAK) == "Ready to focus again?"
    assert completion_message(TimerMode.LONG_BREAK) == "Ready to focus again?"


class TestNotificationController:
    def test_linux_uses_notify_send(self):
        with patch.object(notifications.sys, "platform", "linux"), \
             patch.object(notifications.subprocess, "run") as run:
            assert NotificationController().timer_complete(TimerMode.FOCUS) is True
        cmd = run.call_args[0][0]
        assert cmd == ["notify-send", COMPLETE_TITLE, "Time for a break!"]

    def test_macos_escapes_quotes(self):
        with patch.object(notifications.sys, "platform", "darwin"), \
             patch.object(notifications.subprocess, "run") as run:
            NotificationController().notify('Say "hi"', "body")
        cmd = run.call_args[0][0]
        assert cmd[0] == "osascript"
        assert 'Say \\"hi\\"' in cmd[2]

    @pytest.mark.parametrize("error", [
        FileNotFoundError("notify-send"),
        subprocess.CalledProcessError(1, "notify-send"),
        subprocess.TimeoutExpired("notify-send", 5),
    ])
    def test_failure_returns_false(self, error):
        with patch.object(notifications.sys, "platform", "linux"), \
             patch.object(notifications.subprocess, "run", side_effect=error):
            assert NotificationController().notify("t", "b") is False
