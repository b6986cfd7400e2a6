"""
Word of the Day Manager
One catalog word per calendar day, and whether the learner has seen it.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel

from vocabpro.config import Settings
from vocabpro.managers.base_manager import BaseManager
from vocabpro.models.catalog import LearningItem
from vocabpro.models.state import WordOfTheDay
from vocabpro.services.catalog_service import CatalogService
from vocabpro.services.storage_service import AppStateStore
from vocabpro.utils.dates import Clock, day_key


class WordOfTheDayResult(BaseModel):
    """The day's word as shown to the learner"""
    date: date
    item: Optional[LearningItem] = None
    is_new: bool = False
    is_bookmarked: bool = False
    enabled: bool = True


class WordOfTheDayManager(BaseManager):
    """
    Word of the Day Manager.

    The word depends only on the date, so every learner sees the same
    one. The last word shown is remembered to tell a new day's word from
    one already seen.
    """

    def __init__(
        self,
        store: AppStateStore,
        catalog: CatalogService,
        settings: Settings | None = None,
        clock: Clock | None = None
    ):
        super().__init__(store, settings, clock)
        self.catalog = catalog

    @property
    def name(self) -> str:
        return "word_of_the_day"

    @property
    def description(self) -> str:
        return "Picks the daily word and remembers whether it was seen"

    def get_word_of_the_day(self, day: Optional[date] = None) -> WordOfTheDayResult:
        """
        Word for a day (today by default), marked as seen.

        is_new is True on the first request of the day. An empty
        vocabulary gives a result without an item.
        """
        day = day or self.today()
        state = self.store.load()
        result = WordOfTheDayResult(date=day, enabled=state.settings.show_word_of_day)

        item = self.catalog.word_of_the_day(day)
        if item is None:
            self.logger.warning(f"[{self.name}] No vocabulary to pick a word from")
            return result

        key = day_key(day)
        seen = state.word_of_the_day
        result.item = item
        result.is_new = seen is None or seen.date != key
        result.is_bookmarked = any(b.id == item.key for b in state.bookmarks)

        if seen is None or seen.date != key or seen.word_id != item.key:
            with self.store.mutate() as draft:
                draft.word_of_the_day = WordOfTheDay(date=key, word_id=item.key)
            self.log_debug("Word of the day shown", {"date": key, "word": item.key})

        return result
