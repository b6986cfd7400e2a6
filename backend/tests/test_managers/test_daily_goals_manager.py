"""
Tests for daily goals and the day streak.
"""
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from vocabpro.config import Settings
from vocabpro.managers.daily_goals_manager import DailyGoalsManager
from vocabpro.models.goals import GOAL_PRESETS, DailyGoalRecord
from vocabpro.models.quiz import QuizMode
from vocabpro.services.catalog_service import CatalogService
from vocabpro.services.quiz_service import QuizService
from vocabpro.services.storage_service import AppStateStore, MemoryStorageBackend

TODAY = date(2024, 3, 15)


@pytest.fixture
def goals(store):
    return DailyGoalsManager(store)


def complete_days(store, *offsets):
    with store.mutate() as state:
        for offset in offsets:
            key = (TODAY - timedelta(days=offset)).isoformat()
            state.daily_goals.history[key] = DailyGoalRecord(
                questions_answered=30, points_earned=300, completed=True
            )


class TestGoal:
    """Tests for goal configuration"""

    def test_default_preset(self, goals):
        assert goals.get_goal() == GOAL_PRESETS["regular"]

    def test_set_preset(self, goals, store):
        goals.set_custom_goal(5, 50)
        goals.set_goal_preset("serious")

        state = store.load()
        assert goals.get_goal() == GOAL_PRESETS["serious"]
        assert state.daily_goals.custom_goal is None
        assert state.settings.daily_goal_preset == "serious"

    def test_unknown_preset(self, goals):
        with pytest.raises(ValueError, match="Unknown goal preset"):
            goals.set_goal_preset("heroic")

    def test_custom_goal_wins(self, goals):
        goals.set_custom_goal(10, 100)
        assert goals.get_goal().questions == 10

    def test_custom_goal_must_be_positive(self, goals):
        with pytest.raises(ValueError):
            goals.set_custom_goal(0, 100)


class TestProgress:
    """Tests for daily progress"""

    def test_completion_stamped_once(self, goals, clock):
        """Reaching a target stamps completion; later progress leaves the stamp alone."""
        goals.set_custom_goal(10, 100)

        record = goals.update_progress(10, 50)
        first_stamp = record.completed_at
        assert record.completed
        assert first_stamp == clock.now

        clock.advance(hours=2)
        record = goals.update_progress(1, 5)

        assert record.questions_answered == 11
        assert record.points_earned == 55
        assert record.completed_at == first_stamp

    def test_points_alone_complete(self, goals):
        goals.set_custom_goal(10, 100)
        assert goals.update_progress(2, 100).completed

    def test_record_created_on_first_activity(self, goals, clock):
        record = goals.update_progress(1, 10)
        assert record.start_time == clock.now
        assert not record.completed

    def test_percentage(self, goals):
        goals.set_custom_goal(10, 100)
        goals.update_progress(3, 50)
        assert goals.get_progress_percentage() == pytest.approx(50.0)

        goals.update_progress(20, 0)
        assert goals.get_progress_percentage() == 100.0

    def test_empty_day(self, goals):
        assert goals.get_day(TODAY - timedelta(days=3)) == DailyGoalRecord()
        assert goals.get_progress_percentage() == 0.0
        assert not goals.is_goal_complete()

    def test_today_progress(self, goals):
        goals.update_progress(5, 50)
        today = goals.get_today_progress()
        assert today.date == TODAY
        assert today.record.questions_answered == 5
        assert today.percentage == pytest.approx(20.0)
        assert today.streak == 0


class TestStreak:
    """Tests for the day streak"""

    def test_today_incomplete_does_not_break(self, goals, store):
        complete_days(store, 1, 2, 3)
        assert goals.streak_length(TODAY) == 3

    def test_today_counts_when_complete(self, goals, store):
        complete_days(store, 0, 1)
        assert goals.streak_length(TODAY) == 2

    def test_gap_breaks(self, goals, store):
        complete_days(store, 1, 3, 4)
        assert goals.streak_length(TODAY) == 1

    def test_protected_day_bridged(self, goals, store):
        complete_days(store, 1, 3, 4)
        with store.mutate() as state:
            state.streak_shields.protected_dates.append((TODAY - timedelta(days=2)).isoformat())
        assert goals.streak_length(TODAY) == 3

    def test_incomplete_day_breaks(self, goals, store):
        complete_days(store, 1, 3)
        with store.mutate() as state:
            state.daily_goals.history[(TODAY - timedelta(days=2)).isoformat()] = DailyGoalRecord(
                questions_answered=1
            )
        assert goals.streak_length(TODAY) == 1

    def test_no_history(self, goals):
        assert goals.streak_length() == 0


class TestHistory:
    """Tests for weekly history and cleanup"""

    def test_week_history(self, goals, store):
        complete_days(store, 0, 6)
        week = goals.get_week_history(TODAY)

        assert len(week) == 7
        assert week[0].date == TODAY - timedelta(days=6)
        assert week[-1].date == TODAY
        assert week[-1].day_name == "Fri"
        assert [d.completed for d in week] == [True, False, False, False, False, False, True]

    def test_cleanup(self, goals, store):
        complete_days(store, 0, 30, 31, 45)
        with store.mutate() as state:
            state.daily_goals.history["not-a-date"] = DailyGoalRecord()

        removed = goals.cleanup_history(TODAY)

        assert removed == 3
        assert sorted(store.load().daily_goals.history) == [
            (TODAY - timedelta(days=30)).isoformat(),
            TODAY.isoformat(),
        ]


class TestLocalCalendar:
    """Tests for day keys in the learner's timezone"""

    # 20:00 on March 14 in Los Angeles
    EVENING_UTC = datetime(2024, 3, 15, 3, 0, tzinfo=timezone.utc)

    @pytest.fixture
    def pacific_store(self, tmp_path, clock, timers):
        clock.now = self.EVENING_UTC
        settings = Settings(STORAGE_DIR=tmp_path / "pacific", TIMEZONE="America/Los_Angeles")
        return AppStateStore(
            backend=MemoryStorageBackend(),
            settings=settings,
            clock=clock,
            timer_factory=timers
        )

    def test_today_is_local(self, pacific_store):
        assert DailyGoalsManager(pacific_store).today() == date(2024, 3, 14)

    def test_evening_activity_counts_for_local_day(self, pacific_store):
        goals = DailyGoalsManager(pacific_store)
        goals.update_progress(1, 10)

        assert list(pacific_store.load().daily_goals.history) == ["2024-03-14"]
        assert goals.get_today_progress().record.questions_answered == 1

    def test_answers_credited_to_local_day(self, pacific_store, sample_vocabulary):
        catalog = CatalogService.from_records(vocabulary=sample_vocabulary)
        quiz = QuizService(pacific_store, catalog)
        session = quiz.start_quiz(QuizMode.VOCAB, "easy", count=2)

        quiz.submit_answer(session.id, 0, session.questions[0].correct)

        assert "2024-03-14" in pacific_store.load().daily_goals.history
        assert "2024-03-15" not in pacific_store.load().daily_goals.history

    def test_unknown_timezone_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            Settings(STORAGE_DIR=tmp_path, TIMEZONE="Mars/Olympus_Mons")
