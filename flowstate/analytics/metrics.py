"""
Derived metrics — pure projections over session-log snapshots.

Nothing here caches or mutates: every function takes parsed records and
returns a fresh value. Calendar days and hours are local time.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from ..storage.records import ActivitySessionRecord, BreakRecord, FocusSessionRecord


@dataclass
class DayTotal:
    """Completed focus time for one calendar day."""
    date: str                   # "YYYY-MM-DD"
    minutes: int
    sessions: int


@dataclass
class SummaryStats:
    total_focus_minutes: int
    completed_sessions: int
    average_focus_score: Optional[int]     # None until an activity session exists
    total_distractions: int
    streak: int


@dataclass
class HistoryEntry:
    date: datetime
    type: str
    duration: int               # minutes
    focus_score: Optional[int] = None


def _today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


# ---------------------------------------------------------------------------
# Streaks and daily totals
# ---------------------------------------------------------------------------

def compute_streak(records: Sequence[FocusSessionRecord], today: Optional[date] = None) -> int:
    """
    Consecutive calendar days, ending today, with at least one focus-session
    record. Any record counts, completed or not (daily minutes below only
    count completed ones).
    """
    days = {r.local_date().date() for r in records}
    streak = 0
    day = _today(today)
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def compute_daily_minutes(records: Sequence[FocusSessionRecord], day: Optional[date] = None) -> int:
    """Sum of completed focus minutes on *day* (default today)."""
    target = _today(day)
    return sum(
        r.duration for r in records
        if r.completed and r.local_date().date() == target
    )


def goal_progress(minutes: int, goal_minutes: int) -> float:
    """Raw ratio of minutes to goal; may exceed 1.0."""
    if goal_minutes <= 0:
        return 0.0
    return minutes / goal_minutes


def goal_progress_percent(minutes: int, goal_minutes: int) -> float:
    """Progress for a bar: percent, capped at 100."""
    return min(goal_progress(minutes, goal_minutes) * 100.0, 100.0)


def daily_series(
    records: Sequence[FocusSessionRecord], days: int = 7, today: Optional[date] = None
) -> List[DayTotal]:
    """Completed minutes and sessions for each of the last *days* days, oldest first."""
    end = _today(today)
    by_day: Dict[date, List[FocusSessionRecord]] = {}
    for r in records:
        if r.completed:
            by_day.setdefault(r.local_date().date(), []).append(r)

    result = []
    for offset in range(days - 1, -1, -1):
        day = end - timedelta(days=offset)
        day_records = by_day.get(day, [])
        result.append(DayTotal(
            date=day.isoformat(),
            minutes=sum(r.duration for r in day_records),
            sessions=len(day_records),
        ))
    return result


def hourly_distribution(records: Sequence[FocusSessionRecord]) -> List[int]:
    """Focus-session count per local hour of day (index 0–23), completed or not."""
    hours = [0] * 24
    for r in records:
        hours[r.local_date().hour] += 1
    return hours


# ---------------------------------------------------------------------------
# Dashboard summary
# ---------------------------------------------------------------------------

def summary_stats(
    focus: Sequence[FocusSessionRecord],
    activity: Sequence[ActivitySessionRecord],
    today: Optional[date] = None,
) -> SummaryStats:
    completed = [r for r in focus if r.completed]
    average = None
    if activity:
        average = round(sum(a.final_focus_score for a in activity) / len(activity))
    return SummaryStats(
        total_focus_minutes=sum(r.duration for r in completed),
        completed_sessions=len(completed),
        average_focus_score=average,
        total_distractions=sum(a.total_distractions for a in activity),
        streak=compute_streak(focus, today),
    )


def breaks_on(records: Sequence[BreakRecord], day: Optional[date] = None) -> int:
    target = _today(day)
    return sum(1 for b in records if datetime.fromtimestamp(b.timestamp).date() == target)


def session_history(
    focus: Sequence[FocusSessionRecord],
    activity: Sequence[ActivitySessionRecord],
    breaks: Sequence[BreakRecord],
) -> List[HistoryEntry]:
    """All logged sessions and breaks, newest first."""
    entries = [
        HistoryEntry(date=r.local_date(), type="Focus Session", duration=r.duration)
        for r in focus
    ]
    entries += [
        HistoryEntry(
            date=datetime.fromtimestamp(a.start_time).astimezone(),
            type="Activity Monitor",
            duration=a.duration_minutes(),
            focus_score=a.final_focus_score,
        )
        for a in activity
    ]
    entries += [
        HistoryEntry(date=datetime.fromtimestamp(b.timestamp).astimezone(), type=b.type, duration=0)
        for b in breaks
    ]
    entries.sort(key=lambda e: e.date.timestamp(), reverse=True)
    return entries
