"""
Tests for the SM-2 review scheduler.
"""
import random
from datetime import datetime, timedelta, timezone

import pytest

from vocabpro.models.review import ReviewRecord
from vocabpro.utils.srs_algorithm import SRSAlgorithm, round_half_up

FIXED_NOW = datetime(2024, 3, 15, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def algorithm(test_settings):
    return SRSAlgorithm(test_settings)


@pytest.fixture
def fresh(algorithm):
    return algorithm.new_record("Abundant")


class TestUpdate:
    """Tests for SRSAlgorithm.update"""

    def test_first_perfect_answer(self, algorithm, fresh):
        """A fresh record answered perfectly is due again tomorrow with capped ease."""
        record = algorithm.update(fresh, 5, FIXED_NOW)

        assert record.repetitions == 1
        assert record.interval == 1
        assert record.ease_factor == 2.5
        assert record.next_review_at == FIXED_NOW + timedelta(days=1)
        assert record.last_reviewed_at == FIXED_NOW
        assert record.total_reviews == 1
        assert record.correct_count == 1
        assert record.quality == 5

    def test_success_progression(self, algorithm, fresh):
        """Three perfect answers give intervals 1, 3 and round(3 x ease)."""
        intervals = []
        record = fresh
        for _ in range(3):
            record = algorithm.update(record, 5, FIXED_NOW)
            intervals.append(record.interval)

        assert intervals == [1, 3, 8]

    def test_interval_rounds_half_up(self, algorithm):
        """7.5 rounds to 8, not to the even neighbour."""
        record = ReviewRecord(item_id="x", repetitions=2, interval=3, ease_factor=2.5, correct_count=2)
        assert algorithm.update(record, 4, FIXED_NOW).interval == 8

    def test_failure_resets(self, algorithm):
        """A failed review resets repetitions and interval whatever came before."""
        record = ReviewRecord(
            item_id="x", repetitions=7, interval=120, ease_factor=2.2, correct_count=7
        )
        updated = algorithm.update(record, 1, FIXED_NOW)

        assert updated.repetitions == 0
        assert updated.interval == 0
        assert updated.incorrect_count == 1
        assert updated.next_review_at == FIXED_NOW

    def test_ease_factor_updated_on_failure(self, algorithm, fresh):
        """The ease factor is adjusted on failures too."""
        updated = algorithm.update(fresh, 1, FIXED_NOW)
        assert updated.ease_factor == pytest.approx(1.96)

    def test_quality_four_keeps_ease(self, algorithm):
        """Quality 4 leaves the ease factor unchanged."""
        record = ReviewRecord(item_id="x", ease_factor=2.0)
        assert algorithm.update(record, 4, FIXED_NOW).ease_factor == pytest.approx(2.0)

    def test_ease_factor_stays_in_bounds(self, algorithm, fresh):
        """Any sequence of qualities keeps the ease factor within [1.3, 2.5]."""
        rng = random.Random(7)
        record = fresh
        for _ in range(200):
            record = algorithm.update(record, rng.randint(0, 5), FIXED_NOW)
            assert 1.3 <= record.ease_factor <= 2.5

    def test_history_is_bounded(self, algorithm, fresh):
        """Only the most recent 20 reviews are kept."""
        record = fresh
        for day in range(25):
            record = algorithm.update(record, 5, FIXED_NOW + timedelta(days=day))

        assert len(record.history) == 20
        assert record.history[-1].timestamp == FIXED_NOW + timedelta(days=24)
        assert record.history[0].timestamp == FIXED_NOW + timedelta(days=5)

    def test_update_is_pure(self, algorithm, fresh):
        """The input record is not modified."""
        algorithm.update(fresh, 5, FIXED_NOW)
        assert fresh.total_reviews == 0
        assert fresh.history == []

    def test_counts_stay_consistent(self, algorithm, fresh):
        """correct + incorrect always equals total reviews."""
        record = fresh
        for quality in [5, 1, 3, 0, 4, 2]:
            record = algorithm.update(record, quality, FIXED_NOW)
        assert record.correct_count + record.incorrect_count == record.total_reviews == 6


class TestQualityFromResponse:
    """Tests for quality derived from correctness and latency"""

    @pytest.mark.parametrize("is_correct,latency,expected", [
        (False, 500, 1),
        (True, 1500, 5),
        (True, 2000, 4),
        (True, 4999, 4),
        (True, 5000, 3),
        (True, None, 3),
        (True, 0, 3),
    ])
    def test_quality(self, algorithm, is_correct, latency, expected):
        """Latency thresholds map to quality 5, 4 and 3."""
        assert algorithm.quality_from_response(is_correct, latency) == expected


class TestDueScore:
    """Tests for the selection priority of items"""

    def test_unseen_scores_highest(self, algorithm):
        """Items without a record score 100."""
        assert algorithm.due_score(None, FIXED_NOW) == 100

    def test_overdue(self, algorithm):
        """Overdue items gain 5 per day late."""
        record = ReviewRecord(
            item_id="x", correct_count=2, next_review_at=FIXED_NOW - timedelta(days=2)
        )
        assert algorithm.due_score(record, FIXED_NOW) == pytest.approx(60)

    def test_overdue_is_capped(self, algorithm):
        """Lateness adds at most 50."""
        record = ReviewRecord(
            item_id="x", correct_count=2, next_review_at=FIXED_NOW - timedelta(days=40)
        )
        assert algorithm.due_score(record, FIXED_NOW) == pytest.approx(100)

    def test_upcoming_decays(self, algorithm):
        """Items not yet due lose 2 per day until due, down to 0."""
        soon = ReviewRecord(item_id="x", correct_count=2, next_review_at=FIXED_NOW + timedelta(days=5))
        later = ReviewRecord(item_id="y", correct_count=2, next_review_at=FIXED_NOW + timedelta(days=40))

        assert algorithm.due_score(soon, FIXED_NOW) == pytest.approx(40)
        assert algorithm.due_score(later, FIXED_NOW) == 0

    def test_struggling_bonus(self, algorithm):
        """Items failed at least as often as passed get +20."""
        record = ReviewRecord(
            item_id="x", correct_count=1, incorrect_count=1, next_review_at=FIXED_NOW
        )
        assert algorithm.due_score(record, FIXED_NOW) == pytest.approx(70)

    def test_unanswered_record_gets_no_bonus(self, algorithm):
        """A reset record does not outrank never-seen items."""
        reset = algorithm.new_record("Abundant")
        assert algorithm.due_score(reset, FIXED_NOW) == algorithm.due_score(None, FIXED_NOW) == 100

    def test_naive_schedule_is_read_as_utc(self, algorithm):
        """Stored timestamps without an offset compare against an aware clock."""
        record = ReviewRecord.model_validate({
            "itemId": "x",
            "correctCount": 2,
            "nextReviewAt": "2024-03-13T10:00:00",
        })
        assert record.next_review_at.tzinfo is not None
        assert algorithm.due_score(record, FIXED_NOW) == pytest.approx(60)


class TestClassification:
    """Tests for struggling and mastered predicates"""

    def test_struggling(self, algorithm):
        assert algorithm.is_struggling(ReviewRecord(item_id="x", correct_count=2, incorrect_count=1))
        assert not algorithm.is_struggling(ReviewRecord(item_id="x", correct_count=3, incorrect_count=1))
        assert not algorithm.is_struggling(ReviewRecord(item_id="x"))
        assert not algorithm.is_struggling(None)

    def test_mastered(self, algorithm):
        assert algorithm.is_mastered(ReviewRecord(item_id="x", repetitions=3, correct_count=3))
        assert not algorithm.is_mastered(ReviewRecord(item_id="x", repetitions=2, correct_count=3))

    def test_is_due_for_review(self, algorithm):
        record = ReviewRecord(item_id="x", next_review_at=FIXED_NOW + timedelta(hours=1))
        assert algorithm.is_due_for_review(None, FIXED_NOW)
        assert not algorithm.is_due_for_review(record, FIXED_NOW)
        assert algorithm.is_due_for_review(record, FIXED_NOW + timedelta(hours=2))


def test_round_half_up():
    """Halves round away from zero."""
    assert round_half_up(2.5) == 3
    assert round_half_up(7.5) == 8
    assert round_half_up(7.49) == 7
