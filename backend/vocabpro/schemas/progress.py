"""
Progress Schemas
Request and response schemas for progress, goals, shields, bookmarks and data endpoints.
"""
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field

from vocabpro.managers.review_manager import ReviewStats
from vocabpro.models.progress import ProgressStats
from vocabpro.utils.gamification import LevelProgress


# ==================== REQUEST SCHEMAS ====================

class GoalPresetRequest(BaseModel):
    """Switch to a preset daily goal."""
    preset: str = Field(..., description="casual, regular, serious or intense")


class CustomGoalRequest(BaseModel):
    """Custom daily goal."""
    questions: int = Field(..., ge=1)
    points: int = Field(..., ge=1)


class AddShieldsRequest(BaseModel):
    amount: int = Field(default=1, ge=1)


class ProtectStreakRequest(BaseModel):
    """Bridge the gap since the last active day."""
    last_active_day: Optional[date] = Field(
        default=None,
        description="Defaults to the day of the last answer"
    )


class BookmarkRequest(BaseModel):
    """Bookmark a catalog item."""
    item_key: str
    mode: str = "vocab"


class BookmarkNotesRequest(BaseModel):
    notes: str = Field(default="", max_length=2000)


class SettingsUpdateRequest(BaseModel):
    """Settings to change (snake_case or camelCase keys)."""
    updates: dict[str, Any]


class ImportRequest(BaseModel):
    """Exported document as text."""
    data: str


class ResetRequest(BaseModel):
    confirm: bool = False


# ==================== RESPONSE SCHEMAS ====================

class ProgressOverviewResponse(BaseModel):
    """Learner statistics, level and review summary."""
    stats: ProgressStats
    level: LevelProgress
    reviews: ReviewStats
    badges_earned: int = 0
    badges_total: int = 0
