"""
Base Manager
Abstract base class for the state managers.
Provides common interface, logging, clock and store access.
"""
import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any

from vocabpro.config import Settings
from vocabpro.services.storage_service import AppStateStore
from vocabpro.utils.dates import Clock, local_date


class BaseManager(ABC):
    """
    Abstract base class for all managers.

    Each manager should:
    - Own one section of the AppState (reviews, progress, goals, ...)
    - Change state only through the injected AppStateStore
    - Expose `apply_*` methods that edit a draft state in place, so several
      managers can take part in one store mutation
    - Log its operations for debugging
    """

    def __init__(
        self,
        store: AppStateStore,
        settings: Settings | None = None,
        clock: Clock | None = None
    ):
        """
        Initialize base manager.

        Args:
            store: State store shared by all managers
            settings: Application settings (uses the store's if not provided)
            clock: Time source (uses the store's if not provided)
        """
        self.store = store
        self.settings = settings or store.settings
        self.clock = clock or store.clock

        # Setup logging for this manager
        self.logger = logging.getLogger(f"manager.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Manager name for logging and identification"""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Manager description for documentation"""
        pass

    def now(self) -> datetime:
        return self.clock()

    def today(self) -> date:
        return self.local_day(self.clock())

    def local_day(self, value: datetime) -> date:
        """Calendar day of an instant in the learner's timezone."""
        return local_date(value, self.settings.TIMEZONE)

    def log_start(self, context: dict | None = None) -> None:
        """Log manager starting an operation"""
        msg = f"[{self.name}] Starting operation"
        if context:
            msg += f" - Context: {context}"
        self.logger.debug(msg)

    def log_complete(self, result: Any = None) -> None:
        """Log manager completed an operation"""
        msg = f"[{self.name}] Operation complete"
        if result:
            msg += f" - Result: {result}"
        self.logger.debug(msg)

    def log_debug(self, message: str, data: Any = None) -> None:
        """Log debug information"""
        msg = f"[{self.name}] {message}"
        if data:
            msg += f" - Data: {data}"
        self.logger.debug(msg)
