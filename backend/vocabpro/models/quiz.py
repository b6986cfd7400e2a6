"""
Quiz Models
In-memory quiz sessions, questions and per-answer outcomes.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from vocabpro.models.catalog import LearningItem
from vocabpro.models.progress import MasteryBucket


class QuizMode(str, Enum):
    """Quiz mode"""
    VOCAB = "vocab"
    SYNONYM = "synonym"
    ANTONYM = "antonym"
    ACRONYM = "acronym"
    ONEWORD = "oneword"

    @property
    def needs_difficulty(self) -> bool:
        return self in (QuizMode.VOCAB, QuizMode.SYNONYM, QuizMode.ANTONYM)


class Question(BaseModel):
    """One multiple-choice question built from a catalog item"""
    item_key: str
    mode: QuizMode
    prompt: str
    options: list[str]
    correct: str
    item: LearningItem


class QuizAnswer(BaseModel):
    """Answer given to one question of a session"""
    question_index: int
    selected: str
    is_correct: bool
    response_time_ms: Optional[int] = None
    points_awarded: int = 0


class QuizSession(BaseModel):
    """Quiz in progress"""
    id: str
    mode: QuizMode
    difficulty: Optional[str] = None
    questions: list[Question]
    answers: list[QuizAnswer] = Field(default_factory=list)
    started_at: datetime
    completed_at: Optional[datetime] = None

    @property
    def score(self) -> int:
        return sum(a.points_awarded for a in self.answers)

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def is_answered(self, question_index: int) -> bool:
        return any(a.question_index == question_index for a in self.answers)


class AnswerResult(BaseModel):
    """Everything that changed because of one answer"""
    item_key: str
    is_correct: bool
    correct_answer: str
    quality: int
    points_awarded: int
    current_streak: int
    total_points: int
    level: int
    leveled_up: bool = False
    new_badges: list[str] = Field(default_factory=list)
    bucket: MasteryBucket
    next_review_at: Optional[datetime] = None
    daily_goal_completed: bool = False


class FlashcardDeck(BaseModel):
    """Items chosen for a flashcard run"""
    mode: QuizMode
    difficulty: Optional[str] = None
    cards: list[LearningItem]
