"""
Session log records — the immutable entries appended to the log store.

Records are persisted as plain JSON objects using the camelCase keys of the
original browser storage layout, so exports stay interchangeable:

    focusSessions     {"date": "<ISO-8601>", "duration": 25, "completed": true}
    activitySessions  {"startTime": <epoch ms>, "endTime": <epoch ms>,
                       "finalFocusScore": 87, "totalDistractions": 2}
    breakHistory      {"timestamp": <epoch ms>, "type": "Eye Rest"}
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_local(dt: datetime) -> datetime:
    """Return *dt* in local time; naive datetimes are taken as already local."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone()


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string or epoch milliseconds into a local datetime."""
    if isinstance(value, bool):
        raise ValueError(f"not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(epoch_seconds(value))
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = to_local(datetime.fromisoformat(text))
        parsed.timestamp()                            # out-of-range years fail here, not in analytics
        return parsed
    raise ValueError(f"not a timestamp: {value!r}")


def epoch_seconds(value: Any) -> float:
    """
    Convert epoch milliseconds to Unix seconds, rejecting anything that is
    not a finite number representable as a local datetime.
    """
    if isinstance(value, bool):
        raise ValueError(f"not a timestamp: {value!r}")
    seconds = float(value) / 1000.0
    if not math.isfinite(seconds):
        raise ValueError(f"not a timestamp: {value!r}")
    datetime.fromtimestamp(seconds).astimezone()     # OverflowError / OSError when out of range
    return seconds


def _finite_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    return int(value)


def _epoch_ms(ts: float) -> int:
    return int(round(ts * 1000))


@dataclass(frozen=True)
class FocusSessionRecord:
    date: datetime
    duration: int          # minutes
    completed: bool

    def local_date(self) -> datetime:
        return to_local(self.date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "duration": self.duration,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "FocusSessionRecord":
        duration = raw["duration"]
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            raise ValueError(f"bad duration: {duration!r}")
        return cls(
            date=parse_timestamp(raw["date"]),
            duration=int(duration),
            completed=bool(raw.get("completed", False)),
        )


@dataclass(frozen=True)
class ActivitySessionRecord:
    start_time: float       # Unix seconds
    end_time: float
    final_focus_score: int
    total_distractions: int

    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time) // 60)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startTime": _epoch_ms(self.start_time),
            "endTime": _epoch_ms(self.end_time),
            "finalFocusScore": self.final_focus_score,
            "totalDistractions": self.total_distractions,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ActivitySessionRecord":
        return cls(
            start_time=epoch_seconds(raw["startTime"]),
            end_time=epoch_seconds(raw["endTime"]),
            final_focus_score=_finite_int(raw["finalFocusScore"]),
            total_distractions=_finite_int(raw.get("totalDistractions", 0)),
        )


@dataclass(frozen=True)
class BreakRecord:
    timestamp: float        # Unix seconds
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": _epoch_ms(self.timestamp), "type": self.type}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "BreakRecord":
        return cls(timestamp=epoch_seconds(raw["timestamp"]), type=str(raw["type"]))


def _parse_all(
    raw_records: Iterable[Any], parse: Callable[[Dict[str, Any]], T], kind: str
) -> List[T]:
    out: List[T] = []
    for i, raw in enumerate(raw_records or []):
        try:
            out.append(parse(raw))
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
            logger.warning("Skipping malformed %s record #%d: %s", kind, i, e)
    return out


def parse_focus_sessions(raw_records: Iterable[Any]) -> List[FocusSessionRecord]:
    return _parse_all(raw_records, FocusSessionRecord.from_dict, "focus session")


def parse_activity_sessions(raw_records: Iterable[Any]) -> List[ActivitySessionRecord]:
    return _parse_all(raw_records, ActivitySessionRecord.from_dict, "activity session")


def parse_breaks(raw_records: Iterable[Any]) -> List[BreakRecord]:
    return _parse_all(raw_records, BreakRecord.from_dict, "break")
