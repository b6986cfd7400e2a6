"""
Review Manager
Owns the per-item review records and answers scheduling queries.
"""
from datetime import datetime
from typing import Optional, Sequence

from pydantic import BaseModel

from vocabpro.managers.base_manager import BaseManager
from vocabpro.models.catalog import LearningItem
from vocabpro.models.review import ReviewRecord
from vocabpro.models.state import AppState
from vocabpro.utils.srs_algorithm import SRSAlgorithm


class ReviewStats(BaseModel):
    """Summary of all review records"""
    total_words: int = 0
    mastered_words: int = 0
    learning_words: int = 0
    new_words: int = 0
    due_today: int = 0
    average_ease: float = 2.5
    total_reviews: int = 0


class ReviewManager(BaseManager):
    """
    Review Manager - spaced repetition records.

    Records are created lazily on the first answer for an item and are
    only changed through SRSAlgorithm.update.
    """

    MASTERED_REPETITIONS = 5

    def __init__(self, store, algorithm: Optional[SRSAlgorithm] = None, **kwargs):
        super().__init__(store, **kwargs)
        self.algorithm = algorithm or SRSAlgorithm(self.settings)

    @property
    def name(self) -> str:
        return "review"

    @property
    def description(self) -> str:
        return "Schedules item reviews with the SM-2 algorithm"

    # ==================== STATE CHANGES ====================

    def apply_answer(
        self,
        state: AppState,
        item_id: str,
        quality: int,
        now: datetime
    ) -> ReviewRecord:
        """Update the item's record inside a draft state."""
        record = state.review_records.get(item_id) or self.algorithm.new_record(item_id)
        updated = self.algorithm.update(record, quality, now)
        state.review_records[item_id] = updated
        return updated

    def record_answer(
        self,
        item_id: str,
        is_correct: bool,
        response_time_ms: Optional[int] = None
    ) -> ReviewRecord:
        """
        Record one answer for an item.

        Args:
            item_id: Item key
            is_correct: Whether the answer was correct
            response_time_ms: Answer latency, None when unknown

        Returns:
            Updated review record
        """
        quality = self.algorithm.quality_from_response(is_correct, response_time_ms)
        self.log_start({"item_id": item_id, "quality": quality})
        with self.store.mutate() as state:
            record = self.apply_answer(state, item_id, quality, self.now())
        self.log_complete({"interval": record.interval, "ease_factor": record.ease_factor})
        return record

    def reset_item(self, item_id: str) -> bool:
        """Restore an item's record to its defaults. Returns False if unknown."""
        with self.store.mutate() as state:
            if item_id not in state.review_records:
                return False
            state.review_records[item_id] = self.algorithm.new_record(item_id)
        return True

    def clear_all(self) -> None:
        with self.store.mutate() as state:
            state.review_records = {}
        self.log_debug("All review records cleared")

    # ==================== QUERIES ====================

    def get_entry(self, item_id: str) -> ReviewRecord:
        """Record of an item (defaulted, not stored, if never reviewed)."""
        return self.store.load().review_records.get(item_id) or self.algorithm.new_record(item_id)

    def get_records(self) -> dict[str, ReviewRecord]:
        return self.store.load().review_records

    def get_due_items(self, items: Sequence[LearningItem], limit: int = 10) -> list[LearningItem]:
        """Items ranked by due score, highest first."""
        records = self.get_records()
        now = self.now()
        ranked = sorted(
            items,
            key=lambda item: self.algorithm.due_score(records.get(item.key), now),
            reverse=True
        )
        return ranked[:limit]

    def get_struggling_items(self, items: Sequence[LearningItem], limit: int = 10) -> list[LearningItem]:
        """Struggling items, largest incorrect-minus-correct deficit first."""
        records = self.get_records()
        struggling = [item for item in items if self.algorithm.is_struggling(records.get(item.key))]
        struggling.sort(key=lambda item: self.algorithm.deficit(records[item.key]), reverse=True)
        return struggling[:limit]

    def get_mastered_items(self, items: Sequence[LearningItem]) -> list[LearningItem]:
        records = self.get_records()
        return [item for item in items if self.algorithm.is_mastered(records.get(item.key))]

    def get_stats(self) -> ReviewStats:
        """Counts and averages over every review record."""
        records = list(self.get_records().values())
        if not records:
            return ReviewStats(average_ease=self.algorithm.initial_ease_factor)

        today = self.today()
        return ReviewStats(
            total_words=len(records),
            mastered_words=sum(1 for r in records if r.repetitions >= self.MASTERED_REPETITIONS),
            learning_words=sum(1 for r in records if 0 < r.repetitions < self.MASTERED_REPETITIONS),
            new_words=sum(1 for r in records if r.repetitions == 0),
            due_today=sum(
                1 for r in records
                if r.next_review_at is None or self.local_day(r.next_review_at) <= today
            ),
            average_ease=sum(r.ease_factor for r in records) / len(records),
            total_reviews=sum(r.total_reviews for r in records),
        )
