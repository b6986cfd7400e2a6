"""
Tests for the quiz history.
"""
from datetime import timedelta

import pytest

from vocabpro.managers.quiz_history_manager import QuizHistoryManager, accuracy_percent


@pytest.fixture
def history(store):
    return QuizHistoryManager(store)


class TestQuizHistory:
    """Tests for recording quizzes"""

    def test_add(self, history, clock):
        entry = history.add("vocab", 10, 7, 85, difficulty="easy", time_spent=60, words=["Brave"])

        assert entry.accuracy == 70
        assert entry.date == clock.now
        assert history.get(entry.id) == entry
        assert history.get("missing") is None

    def test_newest_first(self, history):
        first = history.add("vocab", 10, 5, 50)
        second = history.add("acronym", 10, 6, 72)
        assert [e.id for e in history.recent()] == [second.id, first.id]
        assert [e.id for e in history.recent(1)] == [second.id]

    def test_bounded(self, history, test_settings):
        for i in range(test_settings.QUIZ_HISTORY_MAX + 5):
            history.add("vocab", 10, i % 10, i)

        entries = history.recent(100)
        assert len(entries) == test_settings.QUIZ_HISTORY_MAX
        assert entries[0].score == test_settings.QUIZ_HISTORY_MAX + 4

    def test_clear(self, history):
        history.add("vocab", 10, 5, 50)
        history.clear()
        assert history.recent() == []

    def test_negative_time_clamped(self, history):
        assert history.add("vocab", 1, 1, 10, time_spent=-5).time_spent == 0


class TestQuizHistoryStats:
    """Tests for history aggregates"""

    def test_empty(self, history):
        stats = history.get_stats()
        assert stats.total_quizzes == 0
        assert stats.average_accuracy == 0
        assert len(stats.last_7_days) == 7

    def test_breakdowns(self, history, clock):
        history.add("vocab", 10, 8, 90, difficulty="easy")
        history.add("vocab", 10, 4, 40, difficulty="hard")
        clock.advance(days=1)
        history.add("acronym", 5, 5, 60)

        stats = history.get_stats()

        assert stats.total_quizzes == 3
        assert stats.total_questions == 25
        assert stats.total_correct == 17
        assert stats.total_score == 190
        assert stats.average_accuracy == 68
        assert stats.by_mode["vocab"].quizzes == 2
        assert stats.by_mode["vocab"].correct == 12
        assert stats.by_mode["acronym"].total == 5
        assert set(stats.by_difficulty) == {"easy", "hard"}

        assert stats.last_7_days[-1].date == clock.now.date()
        assert stats.last_7_days[-1].quizzes == 1
        assert stats.last_7_days[-2].quizzes == 2
        assert stats.last_7_days[-2].score == 130
        assert stats.last_7_days[0].date == clock.now.date() - timedelta(days=6)


@pytest.mark.parametrize("correct,total,expected", [(0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (5, 5, 100)])
def test_accuracy_percent(correct, total, expected):
    assert accuracy_percent(correct, total) == expected
