"""
FastAPI Dependencies
Process-wide store, catalog, service and manager instances.

Tests replace these through `app.dependency_overrides`.
"""
import logging
from functools import lru_cache

from fastapi import Depends

from vocabpro.config import get_settings
from vocabpro.managers.bookmarks_manager import BookmarksManager
from vocabpro.managers.daily_goals_manager import DailyGoalsManager
from vocabpro.managers.progress_manager import ProgressManager
from vocabpro.managers.quiz_history_manager import QuizHistoryManager
from vocabpro.managers.review_manager import ReviewManager
from vocabpro.managers.settings_manager import SettingsManager
from vocabpro.managers.streak_protection_manager import StreakProtectionManager
from vocabpro.managers.word_of_the_day_manager import WordOfTheDayManager
from vocabpro.services.catalog_service import CatalogService, load_default_catalog
from vocabpro.services.quiz_service import QuizService
from vocabpro.services.storage_service import AppStateStore


logger = logging.getLogger(__name__)


@lru_cache()
def get_store() -> AppStateStore:
    """The learner's state store (file backed, one per process)."""
    settings = get_settings()
    logger.info(f"Using state storage at {settings.STORAGE_DIR}")
    return AppStateStore(settings=settings)


@lru_cache()
def get_catalog() -> CatalogService:
    return load_default_catalog(get_settings())


@lru_cache()
def _quiz_service(store: AppStateStore, catalog: CatalogService) -> QuizService:
    return QuizService(store, catalog)


def get_quiz_service(
    store: AppStateStore = Depends(get_store),
    catalog: CatalogService = Depends(get_catalog)
) -> QuizService:
    """Quiz service bound to the store and catalog (sessions survive across requests)."""
    return _quiz_service(store, catalog)


# ==================== MANAGERS ====================

def get_review_manager(store: AppStateStore = Depends(get_store)) -> ReviewManager:
    return ReviewManager(store)


def get_progress_manager(store: AppStateStore = Depends(get_store)) -> ProgressManager:
    return ProgressManager(store)


def get_goals_manager(store: AppStateStore = Depends(get_store)) -> DailyGoalsManager:
    return DailyGoalsManager(store)


def get_shields_manager(store: AppStateStore = Depends(get_store)) -> StreakProtectionManager:
    return StreakProtectionManager(store)


def get_bookmarks_manager(store: AppStateStore = Depends(get_store)) -> BookmarksManager:
    return BookmarksManager(store)


def get_history_manager(store: AppStateStore = Depends(get_store)) -> QuizHistoryManager:
    return QuizHistoryManager(store)


def get_settings_manager(store: AppStateStore = Depends(get_store)) -> SettingsManager:
    return SettingsManager(store)


def get_word_of_the_day_manager(
    store: AppStateStore = Depends(get_store),
    catalog: CatalogService = Depends(get_catalog)
) -> WordOfTheDayManager:
    return WordOfTheDayManager(store, catalog)
