"""
Spaced Repetition System (SRS) Algorithm
Implementation of the SM-2 algorithm used by the review scheduler.

The SM-2 algorithm calculates review intervals based on:
- Quality of response (0-5 scale)
- Ease factor (difficulty multiplier)
- Number of consecutive successful repetitions

Quality Response Scale (as derived from answers):
1 - Incorrect response
3 - Correct, slow or unknown response time
4 - Correct after hesitation
5 - Correct with no hesitation
"""
import math
from datetime import datetime, timedelta
from typing import Optional

from vocabpro.config import Settings, get_settings
from vocabpro.models.review import ReviewEvent, ReviewRecord
from vocabpro.utils.dates import days_between


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


class SRSAlgorithm:
    """
    SM-2 Spaced Repetition Algorithm

    The algorithm adjusts review intervals based on performance:
    - Correct answers increase interval (1 day, 3 days, then interval x ease)
    - Incorrect answers reset repetitions and interval to zero
    - Ease factor always adjusts, clamped to [1.3, 2.5]

    All methods are pure: they take the current time as an argument and
    return new records instead of mutating their input.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.initial_interval = self.settings.SRS_INITIAL_INTERVAL_DAYS
        self.second_interval = self.settings.SRS_SECOND_INTERVAL_DAYS
        self.initial_ease_factor = self.settings.SRS_INITIAL_EASE_FACTOR
        self.min_ease_factor = self.settings.SRS_MIN_EASE_FACTOR
        self.max_ease_factor = self.settings.SRS_MAX_EASE_FACTOR
        self.history_limit = self.settings.SRS_HISTORY_LIMIT

    def new_record(self, item_id: str) -> ReviewRecord:
        """Defaulted record for an item that has never been reviewed."""
        return ReviewRecord(item_id=item_id, ease_factor=self.initial_ease_factor)

    def update(
        self,
        record: ReviewRecord,
        quality_response: int,
        now: datetime
    ) -> ReviewRecord:
        """
        Apply one review to a record.

        Args:
            record: Current review record (left untouched)
            quality_response: Quality of response (0-5)
            now: Review time

        Returns:
            New ReviewRecord with updated schedule
        """
        quality = max(0, min(5, quality_response))
        updated = record.model_copy(deep=True)

        updated.total_reviews += 1
        updated.last_reviewed_at = now

        if quality >= 3:
            updated.correct_count += 1
            if updated.repetitions == 0:
                updated.interval = self.initial_interval
            elif updated.repetitions == 1:
                updated.interval = self.second_interval
            else:
                updated.interval = round_half_up(updated.interval * updated.ease_factor)
            updated.repetitions += 1
        else:
            updated.incorrect_count += 1
            updated.repetitions = 0
            updated.interval = 0

        # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), success or failure
        ease_factor = updated.ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
        updated.ease_factor = self.clamp_ease_factor(ease_factor)

        updated.next_review_at = now + timedelta(days=updated.interval)
        updated.quality = quality

        updated.history.append(ReviewEvent(
            timestamp=now,
            quality=quality,
            interval=updated.interval,
            ease_factor=updated.ease_factor
        ))
        updated.history = updated.history[-self.history_limit:]

        return updated

    def clamp_ease_factor(self, ease_factor: float) -> float:
        return max(self.min_ease_factor, min(self.max_ease_factor, ease_factor))

    def quality_from_response(
        self,
        is_correct: bool,
        response_time_ms: Optional[int] = None
    ) -> int:
        """
        Calculate quality based on correctness and response time.

        Args:
            is_correct: Whether the answer was correct
            response_time_ms: Time taken to respond, None when unknown

        Returns:
            Quality response (1, 3, 4 or 5)
        """
        if not is_correct:
            return 1

        if response_time_ms is None or response_time_ms <= 0:
            return 3  # Unknown latency
        if response_time_ms < self.settings.SRS_FAST_RESPONSE_MS:
            return 5  # Perfect recall
        if response_time_ms < self.settings.SRS_SLOW_RESPONSE_MS:
            return 4  # Correct with hesitation
        return 3

    def is_due_for_review(self, record: Optional[ReviewRecord], now: datetime) -> bool:
        """Check if an item is due for review (never-reviewed items are due)."""
        if record is None or record.next_review_at is None:
            return True
        return now >= record.next_review_at

    def due_score(self, record: Optional[ReviewRecord], now: datetime) -> float:
        """
        Selection priority of an item (higher is more urgent).

        Never-seen items score highest. Overdue items score between 50 and
        100 depending on how late they are; upcoming items decay towards 0.
        Answered items failed at least as often as passed get a struggling
        bonus.
        """
        s = self.settings
        if record is None:
            return s.DUE_SCORE_NEW

        if record.next_review_at is None:
            # No schedule yet: treated as fully overdue
            score = s.DUE_SCORE_BASE + s.DUE_SCORE_OVERDUE_CAP
        else:
            days_overdue = days_between(record.next_review_at, now)
            if days_overdue >= 0:
                score = s.DUE_SCORE_BASE + min(
                    days_overdue * s.DUE_SCORE_OVERDUE_PER_DAY,
                    s.DUE_SCORE_OVERDUE_CAP
                )
            else:
                score = max(0.0, s.DUE_SCORE_BASE + days_overdue * s.DUE_SCORE_UPCOMING_PER_DAY)

        if record.total_reviews > 0 and record.incorrect_count >= record.correct_count:
            score += s.DUE_SCORE_STRUGGLING_BONUS

        return score

    def is_struggling(self, record: Optional[ReviewRecord]) -> bool:
        """Failed at least once and at least half as often as passed."""
        if record is None:
            return False
        return (
            record.incorrect_count > 0
            and record.incorrect_count >= record.correct_count * 0.5
        )

    def is_mastered(self, record: Optional[ReviewRecord]) -> bool:
        """Three consecutive successes and correct more than twice as often as not."""
        if record is None:
            return False
        return record.repetitions >= 3 and record.correct_count > record.incorrect_count * 2

    def deficit(self, record: ReviewRecord) -> int:
        return record.incorrect_count - record.correct_count


# Singleton instance
srs_algorithm = SRSAlgorithm()
