"""
Progress Models
Aggregate learner statistics: points, streaks, mastery buckets and badges.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, computed_field, model_validator

from vocabpro.models.base import StoredModel


LEVEL_BAND_POINTS = 100
MAX_LEVEL = 10


class MasteryBucket(str, Enum):
    """Mutually exclusive classification of a learner's command of an item"""
    UNSEEN = "unseen"
    LEARNING = "learning"
    STRUGGLING = "struggling"
    MASTERED = "mastered"


def level_for_points(total_points: int) -> int:
    """Level band for a points total (1-10, 100 points per band)."""
    return min(max(total_points, 0) // LEVEL_BAND_POINTS + 1, MAX_LEVEL)


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class ProgressStats(StoredModel):
    """
    Learner statistics.

    Counts, level, modes played and average accuracy are derived from the
    stored fields and are never read back from disk.
    """
    total_points: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    total_answered: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)
    max_streak: int = Field(default=0, ge=0)

    # Mastery buckets (disjoint)
    mastered_words_list: list[str] = Field(default_factory=list)
    learning_words_list: list[str] = Field(default_factory=list)
    struggling_words_list: list[str] = Field(default_factory=list)

    referrals: int = Field(default=0, ge=0)
    modes_played_list: list[str] = Field(default_factory=list)
    earned_badges: list[str] = Field(default_factory=list)
    last_played_at: Optional[datetime] = None
    total_session_time: int = Field(default=0, ge=0, description="Seconds")

    @model_validator(mode="after")
    def enforce_disjoint_buckets(self) -> "ProgressStats":
        # Precedence on repair: mastered, then learning, then struggling
        mastered = _unique(self.mastered_words_list)
        seen = set(mastered)
        learning = [w for w in _unique(self.learning_words_list) if w not in seen]
        seen.update(learning)
        struggling = [w for w in _unique(self.struggling_words_list) if w not in seen]
        self.mastered_words_list = mastered
        self.learning_words_list = learning
        self.struggling_words_list = struggling
        self.modes_played_list = _unique(self.modes_played_list)
        self.earned_badges = _unique(self.earned_badges)
        return self

    @computed_field(alias="masteredWords")
    @property
    def mastered_words(self) -> int:
        return len(self.mastered_words_list)

    @computed_field(alias="learningWords")
    @property
    def learning_words(self) -> int:
        return len(self.learning_words_list)

    @computed_field(alias="strugglingWords")
    @property
    def struggling_words(self) -> int:
        return len(self.struggling_words_list)

    @computed_field(alias="modesPlayed")
    @property
    def modes_played(self) -> int:
        return len(self.modes_played_list)

    @computed_field(alias="level")
    @property
    def level(self) -> int:
        return level_for_points(self.total_points)

    @computed_field(alias="averageAccuracy")
    @property
    def average_accuracy(self) -> float:
        if self.total_answered == 0:
            return 0.0
        return self.correct_answers / self.total_answered * 100

    @property
    def accuracy_ratio(self) -> float:
        """Correct answers over answered questions (0 when nothing answered)."""
        if self.total_answered == 0:
            return 0.0
        return self.correct_answers / self.total_answered

    def bucket_of(self, item_key: str) -> MasteryBucket:
        """Current mastery bucket of an item key."""
        if item_key in self.mastered_words_list:
            return MasteryBucket.MASTERED
        if item_key in self.learning_words_list:
            return MasteryBucket.LEARNING
        if item_key in self.struggling_words_list:
            return MasteryBucket.STRUGGLING
        return MasteryBucket.UNSEEN
