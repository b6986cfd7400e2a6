"""
Tests for adaptive practice selection.
"""
import random
from datetime import datetime, timedelta, timezone

import pytest

from vocabpro.models.catalog import VocabItem
from vocabpro.models.review import ReviewRecord
from vocabpro.utils.practice_selection import sample, select_practice_set, unique_by_key

NOW = datetime(2024, 3, 15, 10, 0, 0, tzinfo=timezone.utc)


def make_items(count):
    return [VocabItem(word=f"word{i}", definition=f"meaning {i}") for i in range(count)]


def scheduled(key, days_from_now, correct=3, incorrect=0):
    return ReviewRecord(
        item_id=key,
        repetitions=correct,
        correct_count=correct,
        incorrect_count=incorrect,
        total_reviews=correct + incorrect,
        next_review_at=NOW + timedelta(days=days_from_now)
    )


class TestSelectPracticeSet:
    """Tests for select_practice_set"""

    @pytest.mark.parametrize("size,count", [(40, 10), (10, 10), (25, 1), (12, 7)])
    def test_exact_distinct_count(self, size, count, test_settings):
        """Exactly `count` distinct items when the catalog is large enough."""
        rng = random.Random(size * count)
        items = make_items(size)
        records = {
            item.key: scheduled(item.key, rng.randint(-10, 10), rng.randint(0, 4), rng.randint(0, 4))
            for item in items[: size // 2]
        }

        result = select_practice_set(items, records, count, NOW, rng=rng, settings=test_settings)

        assert len(result) == count
        assert len({item.key for item in result}) == count

    def test_small_catalog(self, test_settings):
        """A catalog smaller than the request returns every item once."""
        items = make_items(5)
        result = select_practice_set(items, {}, 10, NOW, rng=random.Random(1), settings=test_settings)
        assert sorted(item.key for item in result) == sorted(item.key for item in items)

    def test_duplicates_collapsed(self, test_settings):
        items = make_items(3) + make_items(3)
        result = select_practice_set(items, {}, 10, NOW, rng=random.Random(1), settings=test_settings)
        assert len(result) == 3

    def test_empty_inputs(self, test_settings):
        assert select_practice_set([], {}, 5, NOW, settings=test_settings) == []
        assert select_practice_set(make_items(3), {}, 0, NOW, settings=test_settings) == []

    def test_due_items_first(self, test_settings):
        """Overdue and unseen items fill the due half ahead of scheduled ones."""
        items = make_items(20)
        records = {item.key: scheduled(item.key, 30) for item in items}
        overdue = [items[3].key, items[11].key]
        for key in overdue:
            records[key] = scheduled(key, -3)
        del records[items[17].key]

        result = select_practice_set(items, records, 6, NOW, rng=random.Random(5), settings=test_settings)
        keys = {item.key for item in result}

        assert set(overdue) <= keys
        assert items[17].key in keys

    def test_struggling_items_included(self, test_settings):
        """Struggling items are picked even when nothing is due."""
        items = make_items(30)
        records = {item.key: scheduled(item.key, 30) for item in items}
        records[items[8].key] = scheduled(items[8].key, 30, correct=1, incorrect=4)

        result = select_practice_set(items, records, 4, NOW, rng=random.Random(9), settings=test_settings)

        assert items[8].key in {item.key for item in result}


def test_sample_excludes_and_dedupes():
    values = ["a", "b", "b", "c", "d"]
    result = sample(values, 10, random.Random(0), exclude={"a"})
    assert sorted(result) == ["b", "c", "d"]


def test_unique_by_key_keeps_first():
    first = VocabItem(word="x", definition="first")
    second = VocabItem(word="x", definition="second")
    assert unique_by_key([first, second]) == [first]
