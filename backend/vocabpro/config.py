"""
Configuration settings for VocabPro Core.
All environment variables and tunable constants are centralized here.
"""
from pathlib import Path
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="VOCABPRO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "VocabPro Core"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # API Settings
    API_V1_PREFIX: str = "/api/v1"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173"
    ]

    # Durable storage
    STORAGE_DIR: Path = Path.home() / ".vocabpro"
    STORAGE_KEY: str = "VOCABPRO_STATE_V1"
    STORAGE_QUOTA_BYTES: int | None = 5 * 1024 * 1024  # browser-like quota, None disables
    SAVE_DEBOUNCE_MS: int = 300
    EXPORT_APP_VERSION: str = "VocabPro-v1"
    EXPORT_VERSION: int = 1
    QUIZ_HISTORY_MAX: int = 50
    QUIZ_HISTORY_TRIM: int = 20  # kept after a quota failure
    DAILY_GOAL_RETENTION_DAYS: int = 30

    # SRS (Spaced Repetition System) Settings
    SRS_INITIAL_INTERVAL_DAYS: int = 1
    SRS_SECOND_INTERVAL_DAYS: int = 3
    SRS_INITIAL_EASE_FACTOR: float = 2.5
    SRS_MIN_EASE_FACTOR: float = 1.3
    SRS_MAX_EASE_FACTOR: float = 2.5
    SRS_HISTORY_LIMIT: int = 20
    SRS_FAST_RESPONSE_MS: int = 2000
    SRS_SLOW_RESPONSE_MS: int = 5000

    # Due score weighting (empirical, tunable)
    DUE_SCORE_NEW: float = 100
    DUE_SCORE_BASE: float = 50
    DUE_SCORE_OVERDUE_PER_DAY: float = 5
    DUE_SCORE_OVERDUE_CAP: float = 50
    DUE_SCORE_UPCOMING_PER_DAY: float = 2
    DUE_SCORE_STRUGGLING_BONUS: float = 20

    # Adaptive practice selection
    PRACTICE_DUE_RATIO: float = 0.5
    PRACTICE_STRUGGLING_RATIO: float = 0.3
    QUIZ_LENGTH: int = 10
    FLASHCARD_DECK_SIZE: int = 20
    FLASHCARD_KNOW_RESPONSE_MS: int = 3000
    FLASHCARD_DONT_KNOW_RESPONSE_MS: int = 5000

    # Daily goals and streaks
    TIMEZONE: Optional[str] = None  # IANA zone of the learner's calendar days, system zone when unset
    DAILY_GOAL_DEFAULT_PRESET: str = "regular"
    STREAK_LOOKBACK_DAYS: int = 365
    SHIELD_START_COUNT: int = 1
    SHIELD_PASSIVE_CAP: int = 3
    SHIELD_MAX: int = 5
    SHIELD_EARN_PERIOD_DAYS: int = 7

    # Catalog
    CATALOG_DIR: Path = PACKAGE_DIR / "data"

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("TIMEZONE")
    @classmethod
    def check_timezone(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{value}'") from e
        return value


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Singleton instance
settings = get_settings()
