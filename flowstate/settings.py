"""
User-tunable settings — timer durations and the user profile, persisted as
the `timerSettings` and `userProfile` categories of the injected log store.

Bad input never fails: each field that is missing, non-numeric,
non-positive, or of the wrong type silently falls back to its default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .storage.log_store import TIMER_SETTINGS, USER_PROFILE, LogStore

logger = logging.getLogger(__name__)

TIMER_DEFAULTS: Dict[str, int] = {
    "focusDuration": 25,            # minutes
    "shortBreakDuration": 5,
    "longBreakDuration": 15,
    "sessionsUntilLongBreak": 4,
}

PROFILE_DEFAULTS: Dict[str, Any] = {
    "name": "",
    "email": "",
    "studyGoal": 240,               # daily goal, minutes
    "notifications": True,
    "autoStartBreaks": False,
    "theme": "light",
    "soundEnabled": True,
    "studyType": "",
}

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


@dataclass(frozen=True)
class TimerSettings:
    focus_duration: int = TIMER_DEFAULTS["focusDuration"]
    short_break_duration: int = TIMER_DEFAULTS["shortBreakDuration"]
    long_break_duration: int = TIMER_DEFAULTS["longBreakDuration"]
    sessions_until_long_break: int = TIMER_DEFAULTS["sessionsUntilLongBreak"]

    def to_dict(self) -> Dict[str, int]:
        return {
            "focusDuration": self.focus_duration,
            "shortBreakDuration": self.short_break_duration,
            "longBreakDuration": self.long_break_duration,
            "sessionsUntilLongBreak": self.sessions_until_long_break,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "TimerSettings":
        values = normalize_timer_settings(raw)
        return cls(
            focus_duration=values["focusDuration"],
            short_break_duration=values["shortBreakDuration"],
            long_break_duration=values["longBreakDuration"],
            sessions_until_long_break=values["sessionsUntilLongBreak"],
        )


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    result = int(number)
    return result if result > 0 else None


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return None


def normalize_timer_settings(raw: Any) -> Dict[str, int]:
    """Return a complete settings dict; invalid fields fall back to defaults."""
    source = raw if isinstance(raw, Mapping) else {}
    result = dict(TIMER_DEFAULTS)
    for key, default in TIMER_DEFAULTS.items():
        if key not in source:
            continue
        value = _positive_int(source[key])
        if value is None:
            logger.debug("timer setting %s=%r invalid; using %s", key, source[key], default)
            continue
        result[key] = value
    return result


def normalize_profile(raw: Any, base: Mapping[str, Any] | None = None) -> Dict[str, Any]:
    """Merge *raw* over *base* (or the defaults), coercing each field to its default's type."""
    result = dict(PROFILE_DEFAULTS)
    if base:
        result.update(normalize_profile(base))
    source = raw if isinstance(raw, Mapping) else {}
    for key, default in PROFILE_DEFAULTS.items():
        if key not in source:
            continue
        value = source[key]
        if isinstance(default, bool):
            coerced = _coerce_bool(value)
        elif isinstance(default, int):
            coerced = _positive_int(value)
        else:
            coerced = value if isinstance(value, str) else None
        if coerced is None:
            logger.debug("profile field %s=%r invalid; keeping %r", key, value, result[key])
            continue
        result[key] = coerced
    return result


# ---------------------------------------------------------------------------
# Store access
# ---------------------------------------------------------------------------

def load_timer_settings(store: LogStore) -> TimerSettings:
    return TimerSettings.from_dict(store.get(TIMER_SETTINGS))


def save_timer_settings(store: LogStore, raw: Any) -> TimerSettings:
    """Normalize *raw* (a mapping or TimerSettings), persist, and return it."""
    if isinstance(raw, TimerSettings):
        raw = raw.to_dict()
    settings = TimerSettings.from_dict(raw)
    store.put(TIMER_SETTINGS, settings.to_dict())
    return settings


def load_profile(store: LogStore) -> Dict[str, Any]:
    return normalize_profile(store.get(USER_PROFILE))


def update_profile(store: LogStore, patch: Any) -> Dict[str, Any]:
    """Apply *patch* (unknown keys ignored) over the stored profile and persist."""
    profile = normalize_profile(patch, base=load_profile(store))
    store.put(USER_PROFILE, profile)
    return profile

