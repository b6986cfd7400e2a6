"""
Progress API Endpoints
REST API for learner statistics, badges, review schedule, quiz history
and the word of the day.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from vocabpro.core.dependencies import (
    get_catalog,
    get_history_manager,
    get_progress_manager,
    get_review_manager,
    get_word_of_the_day_manager,
)
from vocabpro.managers.progress_manager import ProgressManager
from vocabpro.managers.quiz_history_manager import QuizHistoryManager, QuizHistoryStats
from vocabpro.managers.review_manager import ReviewManager
from vocabpro.managers.word_of_the_day_manager import WordOfTheDayManager, WordOfTheDayResult
from vocabpro.models.quiz import QuizMode
from vocabpro.models.review import ReviewRecord
from vocabpro.models.state import QuizHistoryEntry
from vocabpro.schemas.progress import ProgressOverviewResponse
from vocabpro.services.catalog_service import CatalogService
from vocabpro.utils.gamification import BADGES


logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== STATS ENDPOINTS ====================

@router.get("/", response_model=ProgressOverviewResponse)
async def get_progress(
    progress: ProgressManager = Depends(get_progress_manager),
    review: ReviewManager = Depends(get_review_manager)
):
    """
    Get the learner's overview.

    Returns:
    - Points, accuracy, answer streak and mastery lists
    - Level and progress to the next level
    - Review schedule summary
    """
    try:
        stats = progress.get_stats()
        return ProgressOverviewResponse(
            stats=stats,
            level=progress.get_level_progress(),
            reviews=review.get_stats(),
            badges_earned=len(stats.earned_badges),
            badges_total=len(BADGES),
        )
    except Exception as e:
        logger.error(f"Error getting progress: {e}")
        raise HTTPException(status_code=500, detail=f"Error getting progress: {str(e)}")


@router.get("/badges")
async def get_badges(progress: ProgressManager = Depends(get_progress_manager)):
    """Every badge with its earned flag."""
    return {"badges": progress.get_badges()}


@router.post("/referral")
async def add_referral(progress: ProgressManager = Depends(get_progress_manager)):
    """Count a referred friend."""
    stats = progress.add_referral()
    return {"referrals": stats.referrals, "earned_badges": stats.earned_badges}


@router.delete("/stats")
async def reset_stats(progress: ProgressManager = Depends(get_progress_manager)):
    progress.reset_stats()
    return {"status": "reset"}


# ==================== REVIEW ENDPOINTS ====================

@router.get("/reviews/due")
async def get_due_items(
    mode: QuizMode = Query(default=QuizMode.VOCAB),
    difficulty: Optional[str] = Query(default=None),
    limit: int = Query(default=10, ge=1, le=100),
    review: ReviewManager = Depends(get_review_manager),
    catalog: CatalogService = Depends(get_catalog)
):
    """Items ranked by how urgently they need review."""
    items = review.get_due_items(catalog.get_items(mode, difficulty), limit=limit)
    return {"items": [item.key for item in items], "total": len(items)}


@router.get("/reviews/{item_key}", response_model=ReviewRecord)
async def get_review_record(
    item_key: str,
    review: ReviewManager = Depends(get_review_manager)
):
    """Review record of an item (defaults if never reviewed)."""
    return review.get_entry(item_key)


# ==================== HISTORY ENDPOINTS ====================

@router.get("/history", response_model=list[QuizHistoryEntry])
async def get_quiz_history(
    limit: int = Query(default=10, ge=1, le=50),
    history: QuizHistoryManager = Depends(get_history_manager)
):
    """Most recent quizzes, newest first."""
    return history.recent(limit)


@router.get("/history/stats", response_model=QuizHistoryStats)
async def get_quiz_history_stats(history: QuizHistoryManager = Depends(get_history_manager)):
    """Totals by mode, by difficulty and for the last seven days."""
    return history.get_stats()


@router.get("/history/{entry_id}", response_model=QuizHistoryEntry)
async def get_quiz_history_entry(
    entry_id: str,
    history: QuizHistoryManager = Depends(get_history_manager)
):
    entry = history.get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Quiz '{entry_id}' not found")
    return entry


@router.delete("/history")
async def clear_quiz_history(history: QuizHistoryManager = Depends(get_history_manager)):
    history.clear()
    return {"status": "cleared"}


# ==================== WORD OF THE DAY ====================

@router.get("/word-of-the-day", response_model=WordOfTheDayResult)
async def get_word_of_the_day(
    wotd: WordOfTheDayManager = Depends(get_word_of_the_day_manager)
):
    """
    Today's word.

    The same word is shown to every learner on a given day; is_new is
    True on the first request of the day.
    """
    return wotd.get_word_of_the_day()
