"""
Tests for the progress manager.
"""
import pytest

from vocabpro.managers.progress_manager import ProgressManager
from vocabpro.models.progress import MasteryBucket


@pytest.fixture
def progress(store):
    return ProgressManager(store)


class TestProgressManager:
    """Tests for stats updates and queries"""

    def test_record_answer(self, progress, store):
        update = progress.record_answer(True, "hard", "Ephemeral", "vocab")

        assert update.points_awarded == 20
        stats = store.load().progress_stats
        assert stats.total_points == 20
        assert stats.correct_answers == 1
        assert progress.get_mastery_bucket("Ephemeral") == MasteryBucket.LEARNING

    def test_referral_badge(self, progress):
        stats = progress.add_referral()
        assert stats.referrals == 1
        assert "referral" in stats.earned_badges
        assert "referral" in progress.get_stats().earned_badges

    def test_session_time(self, progress):
        progress.add_session_time(90)
        progress.add_session_time(-10)
        assert progress.get_stats().total_session_time == 90

    def test_reset(self, progress):
        progress.record_answer(True, "easy", "Brave", "vocab")
        progress.reset_stats()
        assert progress.get_stats().total_points == 0

    def test_level_progress(self, progress):
        for key in ("Abundant", "Brave", "Candid", "Diligent", "Frugal", "Mystery", "Ephemeral"):
            progress.record_answer(True, "hard", key, "vocab")
        level = progress.get_level_progress()
        assert level.current_level.level == 2

    def test_badges_listing(self, progress):
        progress.record_answer(True, "easy", "Brave", "vocab")
        badges = {b["id"]: b["earned"] for b in progress.get_badges()}
        assert badges["first_word"] is True
        assert badges["streak_5"] is False
