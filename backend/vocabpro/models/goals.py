"""
Goal Models
Daily goal configuration, per-day history and streak shields.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from vocabpro.config import settings
from vocabpro.models.base import StoredModel


class GoalSpec(StoredModel):
    """Daily target; reaching either threshold completes the day"""
    questions: int = Field(..., ge=1)
    points: int = Field(..., ge=1)


GOAL_PRESETS: dict[str, GoalSpec] = {
    "casual": GoalSpec(questions=10, points=100),
    "regular": GoalSpec(questions=25, points=250),
    "serious": GoalSpec(questions=50, points=500),
    "intense": GoalSpec(questions=100, points=1000),
}


class DailyGoalRecord(StoredModel):
    """Progress for one calendar day"""
    questions_answered: int = Field(default=0, ge=0)
    points_earned: int = Field(default=0, ge=0)
    start_time: Optional[datetime] = None
    completed: bool = False
    completed_at: Optional[datetime] = None


class DailyGoals(StoredModel):
    """Goal configuration plus history keyed by day (YYYY-MM-DD)"""
    goal_preset: str = "regular"
    custom_goal: Optional[GoalSpec] = None
    history: dict[str, DailyGoalRecord] = Field(default_factory=dict)


class StreakShields(StoredModel):
    """Streak protection economy"""
    count: int = Field(default_factory=lambda: settings.SHIELD_START_COUNT, ge=0)
    last_used_at: Optional[datetime] = None
    last_earned_at: Optional[datetime] = None
    total_used: int = Field(default=0, ge=0)
    protected_dates: list[str] = Field(
        default_factory=list,
        description="Missed days already bridged by a shield"
    )

    @field_validator("count")
    @classmethod
    def cap_count(cls, value: int) -> int:
        return min(value, settings.SHIELD_MAX)
