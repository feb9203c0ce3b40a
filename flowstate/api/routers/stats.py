"""
/stats — streaks, daily totals, goal progress, distributions and achievements.

Everything here is recomputed from a fresh store snapshot on each request.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from ...analytics.achievements import achievement_summary, compute_achievements
from ...analytics.metrics import (
    compute_daily_minutes,
    compute_streak,
    daily_series,
    goal_progress,
    goal_progress_percent,
    hourly_distribution,
    session_history,
    summary_stats,
)
from ...api.schemas import (
    AchievementOut,
    AchievementsOut,
    DailyMinutesOut,
    DayTotalOut,
    GoalOut,
    HistoryEntryOut,
    HourBucketOut,
    StreakOut,
    SummaryOut,
)
from ...settings import load_profile
from ...storage.log_store import ACTIVITY_SESSIONS, BREAK_HISTORY, FOCUS_SESSIONS
from ...storage.records import parse_activity_sessions, parse_breaks, parse_focus_sessions

router = APIRouter(prefix="/stats", tags=["stats"])


def _get_store(request: Request):
    return request.app.state.store


def _focus(store):
    return parse_focus_sessions(store.get(FOCUS_SESSIONS))


def _activity(store):
    return parse_activity_sessions(store.get(ACTIVITY_SESSIONS))


@router.get("/summary", response_model=SummaryOut)
def get_summary(store=Depends(_get_store)):
    s = summary_stats(_focus(store), _activity(store))
    return SummaryOut(**s.__dict__)


@router.get("/streak", response_model=StreakOut)
def get_streak(store=Depends(_get_store)):
    return StreakOut(streak=compute_streak(_focus(store)))


@router.get("/daily", response_model=DailyMinutesOut)
def get_daily_minutes(
    day: Optional[date] = Query(default=None, description="Local calendar day (default: today)"),
    store=Depends(_get_store),
):
    target = day or date.today()
    return DailyMinutesOut(
        date=target.isoformat(),
        minutes=compute_daily_minutes(_focus(store), target),
    )


@router.get("/daily-series", response_model=List[DayTotalOut])
def get_daily_series(
    days: int = Query(default=7, ge=1, le=366, description="Number of days ending today"),
    store=Depends(_get_store),
):
    return [DayTotalOut(**d.__dict__) for d in daily_series(_focus(store), days=days)]


@router.get("/hourly", response_model=List[HourBucketOut])
def get_hourly(store=Depends(_get_store)):
    """Sessions per local hour of day; hours with no sessions are omitted."""
    counts = hourly_distribution(_focus(store))
    return [
        HourBucketOut(hour=f"{hour:02d}:00", sessions=n)
        for hour, n in enumerate(counts)
        if n > 0
    ]


@router.get("/goal", response_model=GoalOut)
def get_goal(store=Depends(_get_store)):
    """Today's completed minutes against the profile's daily study goal."""
    goal = load_profile(store)["studyGoal"]
    minutes = compute_daily_minutes(_focus(store))
    return GoalOut(
        minutes=minutes,
        goal_minutes=goal,
        ratio=goal_progress(minutes, goal),
        percent=goal_progress_percent(minutes, goal),
    )


@router.get("/achievements", response_model=AchievementsOut)
def get_achievements(store=Depends(_get_store)):
    achievements = compute_achievements(_focus(store), _activity(store))
    summary = achievement_summary(achievements)
    return AchievementsOut(
        achievements=[
            AchievementOut(
                id=a.id,
                title=a.title,
                description=a.description,
                icon=a.icon,
                rarity=a.rarity.value,
                progress=a.progress,
                target=a.target,
                unlocked=a.unlocked,
            )
            for a in achievements
        ],
        unlocked=summary.unlocked,
        total=summary.total,
        points=summary.points,
        completion_percent=summary.completion_percent,
    )


@router.get("/history", response_model=List[HistoryEntryOut])
def get_history(
    limit: int = Query(default=100, ge=1, le=1000),
    store=Depends(_get_store),
):
    """Focus sessions, activity sessions and breaks, newest first."""
    entries = session_history(
        _focus(store), _activity(store), parse_breaks(store.get(BREAK_HISTORY))
    )
    return [
        HistoryEntryOut(
            date=e.date.isoformat(),
            type=e.type,
            duration=e.duration,
            focusScore=e.focus_score,
        )
        for e in entries[:limit]
    ]
