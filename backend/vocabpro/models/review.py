"""
Review Models
Per-item spaced repetition state maintained by the review scheduler.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from vocabpro.models.base import StoredModel


MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 2.5


class ReviewEvent(StoredModel):
    """One entry of a record's bounded review history"""
    timestamp: datetime
    quality: int = Field(..., ge=0, le=5)
    interval: int = Field(..., ge=0)
    ease_factor: float


class ReviewRecord(StoredModel):
    """
    Spaced repetition state of one learning item.

    Created lazily on first review and only changed by the scheduler's
    update operation.
    """
    item_id: str
    ease_factor: float = Field(default=MAX_EASE_FACTOR, description="SM-2 ease factor")
    interval: int = Field(default=0, ge=0, description="Days until next review")
    repetitions: int = Field(default=0, ge=0, description="Consecutive successful reviews")
    next_review_at: Optional[datetime] = None
    last_reviewed_at: Optional[datetime] = None
    quality: Optional[int] = Field(default=None, ge=0, le=5, description="Last quality rating")
    total_reviews: int = Field(default=0, ge=0)
    correct_count: int = Field(default=0, ge=0)
    incorrect_count: int = Field(default=0, ge=0)
    history: list[ReviewEvent] = Field(default_factory=list)

    @field_validator("ease_factor")
    @classmethod
    def clamp_ease_factor(cls, value: float) -> float:
        return max(MIN_EASE_FACTOR, min(MAX_EASE_FACTOR, value))

    @model_validator(mode="after")
    def reconcile_totals(self) -> "ReviewRecord":
        # totalReviews is always the sum of the outcome counters
        total = self.correct_count + self.incorrect_count
        if self.total_reviews != total:
            self.total_reviews = total
        return self

    @property
    def is_new(self) -> bool:
        return self.total_reviews == 0
