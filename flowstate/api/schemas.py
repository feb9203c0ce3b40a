"""
Pydantic schemas for the FastAPI local API.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..actions.pomodoro import TimerMode

# ── Timer ──────────────────────────────────────────────────────────────────

class TimerSettingsOut(BaseModel):
    focusDuration: int
    shortBreakDuration: int
    longBreakDuration: int
    sessionsUntilLongBreak: int


class TimerStateOut(BaseModel):
    mode: TimerMode
    remaining_seconds: int = Field(..., ge=0)
    clock: str
    running: bool
    completed_sessions: int
    progress: float = Field(..., ge=0.0, le=1.0)
    settings: TimerSettingsOut


class ModeSwitchIn(BaseModel):
    mode: TimerMode


# ── Activity ───────────────────────────────────────────────────────────────

class InputCountsIn(BaseModel):
    mouse: int = Field(default=0, ge=0)
    keys: int = Field(default=0, ge=0)


class VisibilityIn(BaseModel):
    hidden: bool


class ActivitySampleOut(BaseModel):
    mouse_movements: int
    keystrokes: int
    focus_score: int
    distractions: int
    timestamp: float


class ActivityStateOut(BaseModel):
    monitoring: bool
    focus_score: int = Field(..., ge=0, le=100)
    status: str
    distractions: int
    session_seconds: int
    recent: List[ActivitySampleOut]


class ActivitySessionOut(BaseModel):
    startTime: int
    endTime: int
    finalFocusScore: int
    totalDistractions: int


# ── Breaks ─────────────────────────────────────────────────────────────────

class BreakStartIn(BaseModel):
    type: str = Field(..., min_length=1)
    duration_seconds: int = Field(default=60, ge=1, le=3600)


class BreakStateOut(BaseModel):
    active: bool
    type: str
    remaining_seconds: int
    duration_seconds: int
    minutes_since_last_break: int
    breaks_today: int


# ── Stats ──────────────────────────────────────────────────────────────────

class StreakOut(BaseModel):
    streak: int


class DailyMinutesOut(BaseModel):
    date: str
    minutes: int


class DayTotalOut(BaseModel):
    date: str
    minutes: int
    sessions: int


class HourBucketOut(BaseModel):
    hour: str
    sessions: int


class GoalOut(BaseModel):
    minutes: int
    goal_minutes: int
    ratio: float
    percent: float = Field(..., ge=0.0, le=100.0)


class SummaryOut(BaseModel):
    total_focus_minutes: int
    completed_sessions: int
    average_focus_score: Optional[int]
    total_distractions: int
    streak: int


class AchievementOut(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    rarity: str
    progress: int
    target: int
    unlocked: bool


class AchievementsOut(BaseModel):
    achievements: List[AchievementOut]
    unlocked: int
    total: int
    points: int
    completion_percent: int


class HistoryEntryOut(BaseModel):
    date: str
    type: str
    duration: int
    focusScore: Optional[int] = None


# ── Profile / data ─────────────────────────────────────────────────────────

class ProfileOut(BaseModel):
    name: str
    email: str
    studyGoal: int
    notifications: bool
    autoStartBreaks: bool
    theme: str
    soundEnabled: bool
    studyType: str


class ImportResultOut(BaseModel):
    imported: List[str]

