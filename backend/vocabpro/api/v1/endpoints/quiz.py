"""
Quiz API Endpoints
REST API for quiz sessions and flashcards.
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from vocabpro.core.dependencies import get_quiz_service
from vocabpro.models.quiz import AnswerResult, FlashcardDeck
from vocabpro.models.review import ReviewRecord
from vocabpro.models.state import QuizHistoryEntry
from vocabpro.schemas.quiz import (
    CompleteQuizRequest,
    FlashcardReviewRequest,
    QuizSessionResponse,
    StartFlashcardsRequest,
    StartQuizRequest,
    SubmitAnswerRequest,
)
from vocabpro.services.quiz_service import (
    ItemNotFoundError,
    QuizError,
    QuizService,
    SessionNotFoundError,
)


logger = logging.getLogger(__name__)

router = APIRouter()


def _to_http(error: QuizError) -> HTTPException:
    if isinstance(error, (SessionNotFoundError, ItemNotFoundError)):
        return HTTPException(status_code=404, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


# ==================== QUIZ ENDPOINTS ====================

@router.post("/start", response_model=QuizSessionResponse)
async def start_quiz(
    request: StartQuizRequest,
    service: QuizService = Depends(get_quiz_service)
):
    """
    Start a quiz.

    Items are chosen by the adaptive selector:
    1. Items most due for review (never-seen first)
    2. Struggling items
    3. Random fill from the rest of the catalog
    """
    try:
        session = service.start_quiz(request.mode, request.difficulty, request.count)
        return QuizSessionResponse.from_session(session)

    except QuizError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Error starting quiz: {e}")
        raise HTTPException(status_code=500, detail=f"Error starting quiz: {str(e)}")


@router.get("/{session_id}", response_model=QuizSessionResponse)
async def get_quiz(
    session_id: str,
    service: QuizService = Depends(get_quiz_service)
):
    """Get the state of a running quiz."""
    try:
        return QuizSessionResponse.from_session(service.get_session(session_id))
    except QuizError as e:
        raise _to_http(e)


@router.post("/{session_id}/answer", response_model=AnswerResult)
async def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    service: QuizService = Depends(get_quiz_service)
):
    """
    Answer one question.

    Updates the review schedule, progress stats and today's goal in one step.
    """
    try:
        return service.submit_answer(
            session_id,
            request.question_index,
            request.selected,
            request.response_time_ms
        )

    except QuizError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Error submitting answer: {e}")
        raise HTTPException(status_code=500, detail=f"Error submitting answer: {str(e)}")


@router.post("/{session_id}/complete", response_model=QuizHistoryEntry)
async def complete_quiz(
    session_id: str,
    request: Optional[CompleteQuizRequest] = None,
    service: QuizService = Depends(get_quiz_service)
):
    """Finish a quiz and record it in the quiz history."""
    try:
        return service.complete_quiz(session_id, request.time_spent if request else None)

    except QuizError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Error completing quiz: {e}")
        raise HTTPException(status_code=500, detail=f"Error completing quiz: {str(e)}")


@router.delete("/{session_id}")
async def abandon_quiz(
    session_id: str,
    service: QuizService = Depends(get_quiz_service)
):
    """Leave a quiz without recording it."""
    if not service.abandon_quiz(session_id):
        raise HTTPException(status_code=404, detail=f"Quiz session '{session_id}' not found")
    return {"status": "abandoned", "session_id": session_id}


# ==================== FLASHCARD ENDPOINTS ====================

flashcards_router = APIRouter()


@flashcards_router.post("/deck", response_model=FlashcardDeck)
async def get_flashcard_deck(
    request: StartFlashcardsRequest,
    service: QuizService = Depends(get_quiz_service)
):
    """Get a flashcard deck from the adaptive selector."""
    try:
        return service.start_flashcards(request.mode, request.difficulty, request.count)

    except QuizError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Error building flashcard deck: {e}")
        raise HTTPException(status_code=500, detail=f"Error building flashcard deck: {str(e)}")


@flashcards_router.post("/review", response_model=ReviewRecord)
async def review_flashcard(
    request: FlashcardReviewRequest,
    service: QuizService = Depends(get_quiz_service)
):
    """Record "know" or "don't know" for a card."""
    try:
        return service.review_flashcard(request.item_key, request.know)

    except QuizError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Error reviewing flashcard: {e}")
        raise HTTPException(status_code=500, detail=f"Error reviewing flashcard: {str(e)}")
