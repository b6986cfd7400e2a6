"""
Application State Models
The root persisted aggregate and the smaller documents it owns.

AppState is the unit of save, export, import and reset.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from vocabpro.models.base import StoredModel
from vocabpro.models.goals import DailyGoals, StreakShields
from vocabpro.models.progress import ProgressStats
from vocabpro.models.review import ReviewRecord
from vocabpro.utils.dates import day_key, parse_day_key


# Schema version of the persisted document
STORAGE_VERSION = 2

# Top-level fields an import must contain at least one of
RECOGNIZED_FIELDS = frozenset({
    "settings",
    "reviewRecords",
    "progressStats",
    "dailyGoals",
    "bookmarks",
    "streakShields",
    "quizHistory",
    "wordOfTheDay",
    # version 1 names
    "srs",
    "stats",
    "streakProtection",
})


class UserSettings(StoredModel):
    """Learner preferences, stored and round-tripped only"""
    sound_enabled: bool = True
    speech_enabled: bool = True
    dark_mode: bool = True
    daily_goal_preset: str = "regular"
    show_word_of_day: bool = True
    show_daily_goals: bool = True
    auto_play_pronunciation: bool = False
    haptic_feedback: bool = True
    notifications_enabled: bool = False
    keyboard_shortcuts_enabled: bool = True
    font_size: str = "medium"


class Bookmark(StoredModel):
    """Saved item for later practice"""
    id: str
    item: dict[str, Any] = Field(default_factory=dict, alias="wordData")
    mode: str = "vocab"
    added_at: Optional[datetime] = None
    review_count: int = Field(default=0, ge=0)
    last_reviewed: Optional[datetime] = None
    notes: str = ""


class QuizHistoryEntry(StoredModel):
    """Summary of one completed quiz"""
    id: str
    date: datetime
    mode: str
    difficulty: Optional[str] = None
    questions_total: int = Field(default=0, ge=0)
    questions_correct: int = Field(default=0, ge=0)
    score: int = 0
    accuracy: int = Field(default=0, ge=0, le=100, description="Rounded percent")
    time_spent: int = Field(default=0, ge=0, description="Seconds")
    words: list[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        # older clients used a millisecond timestamp as the id
        if isinstance(value, (int, float)):
            return str(int(value))
        return value


class WordOfTheDay(StoredModel):
    """Word last shown as the word of the day"""
    date: str = Field(..., description="Day key (YYYY-MM-DD)")
    word_id: str

    @field_validator("date", mode="before")
    @classmethod
    def normalize_day_key(cls, value: Any) -> Any:
        day = parse_day_key(value)
        if day is None:
            raise ValueError(f"Invalid day key: {value!r}")
        return day_key(day)


class AppState(StoredModel):
    """Root persisted document"""
    version: int = STORAGE_VERSION
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    settings: UserSettings = Field(default_factory=UserSettings)
    review_records: dict[str, ReviewRecord] = Field(default_factory=dict)
    progress_stats: ProgressStats = Field(default_factory=ProgressStats)
    daily_goals: DailyGoals = Field(default_factory=DailyGoals)
    bookmarks: list[Bookmark] = Field(default_factory=list)
    streak_shields: StreakShields = Field(default_factory=StreakShields)
    quiz_history: list[QuizHistoryEntry] = Field(default_factory=list)
    word_of_the_day: Optional[WordOfTheDay] = None

    @model_validator(mode="before")
    @classmethod
    def fill_record_ids(cls, data: Any) -> Any:
        # records are keyed by item id; older documents omit it in the value
        if not isinstance(data, dict):
            return data
        records = data.get("reviewRecords", data.get("review_records"))
        if isinstance(records, dict):
            for item_id, record in records.items():
                if isinstance(record, dict) and not (record.get("itemId") or record.get("item_id")):
                    record["itemId"] = item_id
        return data


def default_state(now: Optional[datetime] = None) -> AppState:
    """Fresh state with every field defaulted."""
    return AppState(created_at=now, updated_at=now)


def default_section(name: str) -> Any:
    """Default JSON value of one top-level section (camelCase name)."""
    return AppState().to_storage()[name]
