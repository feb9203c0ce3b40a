"""
Achievements — milestones evaluated fresh from the session log every time.

Each achievement reads one derived metric; it is unlocked once
progress >= target (reaching the target exactly counts).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Sequence

from ..storage.records import ActivitySessionRecord, FocusSessionRecord
from .metrics import compute_streak

EARLY_BIRD_BEFORE_HOUR = 8
NIGHT_OWL_FROM_HOUR = 22
HIGH_FOCUS_SCORE = 90
POINTS_PER_ACHIEVEMENT = 100


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class Metric(str, Enum):
    FIRST_SESSION = "first_session"         # min(completed sessions, 1)
    COMPLETED_SESSIONS = "completed_sessions"
    FOCUS_MINUTES = "focus_minutes"
    STREAK = "streak"
    EARLY_SESSION = "early_session"         # 1 if any session started before 08:00
    LATE_SESSION = "late_session"           # 1 if any session started at/after 22:00
    HIGH_FOCUS_SESSIONS = "high_focus_sessions"


@dataclass(frozen=True)
class AchievementDef:
    id: str
    title: str
    description: str
    icon: str
    rarity: Rarity
    metric: Metric
    target: int


@dataclass
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    rarity: Rarity
    progress: int
    target: int
    unlocked: bool

    def progress_percent(self) -> float:
        return min(self.progress / self.target * 100.0, 100.0)


@dataclass
class AchievementSummary:
    unlocked: int
    total: int
    points: int
    completion_percent: int


CATALOGUE: List[AchievementDef] = [
    AchievementDef("1", "First Steps", "Complete your first focus session",
                   "🎯", Rarity.COMMON, Metric.FIRST_SESSION, 1),
    AchievementDef("2", "Focus Warrior", "Complete 10 focus sessions",
                   "⚔️", Rarity.COMMON, Metric.COMPLETED_SESSIONS, 10),
    AchievementDef("3", "Marathon Runner", "Focus for 100 hours total",
                   "🏃", Rarity.RARE, Metric.FOCUS_MINUTES, 6000),
    AchievementDef("4", "Week Streak", "Study for 7 days in a row",
                   "🔥", Rarity.RARE, Metric.STREAK, 7),
    AchievementDef("5", "Early Bird", "Complete a session before 8 AM",
                   "🌅", Rarity.COMMON, Metric.EARLY_SESSION, 1),
    AchievementDef("6", "Night Owl", "Complete a session after 10 PM",
                   "🦉", Rarity.COMMON, Metric.LATE_SESSION, 1),
    AchievementDef("7", "Century Club", "Complete 100 focus sessions",
                   "💯", Rarity.EPIC, Metric.COMPLETED_SESSIONS, 100),
    AchievementDef("8", "Zen Master", "Maintain 90%+ focus score for 10 sessions",
                   "🧘", Rarity.EPIC, Metric.HIGH_FOCUS_SESSIONS, 10),
    AchievementDef("9", "Unstoppable", "Achieve a 30-day streak",
                   "⚡", Rarity.LEGENDARY, Metric.STREAK, 30),
    AchievementDef("10", "Focus Legend", "Complete 1000 focus sessions",
                   "👑", Rarity.LEGENDARY, Metric.COMPLETED_SESSIONS, 1000),
]


def compute_metrics(
    focus: Sequence[FocusSessionRecord],
    activity: Sequence[ActivitySessionRecord],
    today: Optional[date] = None,
) -> Dict[Metric, int]:
    completed = [r for r in focus if r.completed]
    hours = [r.local_date().hour for r in focus]
    return {
        Metric.FIRST_SESSION: min(len(completed), 1),
        Metric.COMPLETED_SESSIONS: len(completed),
        Metric.FOCUS_MINUTES: sum(r.duration for r in completed),
        Metric.STREAK: compute_streak(focus, today),
        Metric.EARLY_SESSION: int(any(h < EARLY_BIRD_BEFORE_HOUR for h in hours)),
        Metric.LATE_SESSION: int(any(h >= NIGHT_OWL_FROM_HOUR for h in hours)),
        Metric.HIGH_FOCUS_SESSIONS: sum(
            1 for a in activity if a.final_focus_score >= HIGH_FOCUS_SCORE
        ),
    }


def compute_achievements(
    focus: Sequence[FocusSessionRecord],
    activity: Sequence[ActivitySessionRecord] = (),
    today: Optional[date] = None,
    catalogue: Sequence[AchievementDef] = CATALOGUE,
) -> List[Achievement]:
    metrics = compute_metrics(focus, activity, today)
    result = []
    for d in catalogue:
        progress = metrics[d.metric]
        result.append(Achievement(
            id=d.id,
            title=d.title,
            description=d.description,
            icon=d.icon,
            rarity=d.rarity,
            progress=progress,
            target=d.target,
            unlocked=progress >= d.target,
        ))
    return result


def achievement_summary(achievements: Sequence[Achievement]) -> AchievementSummary:
    unlocked = sum(1 for a in achievements if a.unlocked)
    total = len(achievements)
    return AchievementSummary(
        unlocked=unlocked,
        total=total,
        points=unlocked * POINTS_PER_ACHIEVEMENT,
        completion_percent=round(unlocked / total * 100) if total else 0,
    )
