"""
Quiz Schemas
Request and response schemas for quiz and flashcard endpoints.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from vocabpro.models.quiz import QuizMode, QuizSession


# ==================== REQUEST SCHEMAS ====================

class StartQuizRequest(BaseModel):
    """Request to start a quiz."""
    mode: QuizMode = Field(..., description="vocab, synonym, antonym, acronym, oneword")
    difficulty: Optional[str] = Field(
        default=None,
        description="easy, medium or hard (vocab, synonym and antonym only)"
    )
    count: Optional[int] = Field(default=None, ge=1, le=100, description="Number of questions")


class SubmitAnswerRequest(BaseModel):
    """Answer to one question of a session."""
    question_index: int = Field(..., ge=0)
    selected: str = Field(..., description="Chosen option")
    response_time_ms: Optional[int] = Field(default=None, description="Answer latency in milliseconds")


class CompleteQuizRequest(BaseModel):
    """Request to finish a quiz."""
    time_spent: Optional[int] = Field(default=None, ge=0, description="Seconds spent on the quiz")


class StartFlashcardsRequest(BaseModel):
    """Request for a flashcard deck."""
    mode: QuizMode
    difficulty: Optional[str] = None
    count: Optional[int] = Field(default=None, ge=1, le=100)


class FlashcardReviewRequest(BaseModel):
    """Learner's self-assessment of one card."""
    item_key: str
    know: bool


# ==================== RESPONSE SCHEMAS ====================

class QuestionView(BaseModel):
    """Question as shown to the learner (without the answer)."""
    index: int
    item_key: str
    prompt: str
    options: list[str]
    answered: bool = False


class QuizSessionResponse(BaseModel):
    """Quiz session state."""
    id: str
    mode: QuizMode
    difficulty: Optional[str] = None
    started_at: datetime
    questions: list[QuestionView]
    answered: int = 0
    correct: int = 0
    score: int = 0

    @classmethod
    def from_session(cls, session: QuizSession) -> "QuizSessionResponse":
        return cls(
            id=session.id,
            mode=session.mode,
            difficulty=session.difficulty,
            started_at=session.started_at,
            questions=[
                QuestionView(
                    index=index,
                    item_key=question.item_key,
                    prompt=question.prompt,
                    options=question.options,
                    answered=session.is_answered(index),
                )
                for index, question in enumerate(session.questions)
            ],
            answered=len(session.answers),
            correct=session.correct_count,
            score=session.score,
        )
