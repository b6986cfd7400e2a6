"""
Progress Manager
Owns ProgressStats: points, answer streak, mastery buckets, level and badges.
"""
from datetime import datetime
from typing import Optional

from vocabpro.managers.base_manager import BaseManager
from vocabpro.models.progress import MasteryBucket, ProgressStats
from vocabpro.models.state import AppState
from vocabpro.utils.gamification import (
    BADGES,
    LevelProgress,
    StatsUpdate,
    get_earned_badges,
    get_level_progress,
    update_stats,
)


class ProgressManager(BaseManager):
    """
    Progress Manager - gamified learner statistics.

    Level and badges are always recomputed from the stats, never patched.
    """

    @property
    def name(self) -> str:
        return "progress"

    @property
    def description(self) -> str:
        return "Tracks points, streaks, mastery buckets, levels and badges"

    # ==================== STATE CHANGES ====================

    def apply_answer(
        self,
        state: AppState,
        is_correct: bool,
        difficulty_or_mode: Optional[str],
        item_key: Optional[str],
        mode: Optional[str],
        now: datetime
    ) -> StatsUpdate:
        """Apply one answer to the stats of a draft state."""
        update = update_stats(state.progress_stats, is_correct, difficulty_or_mode, item_key, mode, now)
        state.progress_stats = update.stats
        return update

    def record_answer(
        self,
        is_correct: bool,
        difficulty_or_mode: Optional[str],
        item_key: Optional[str] = None,
        mode: Optional[str] = None
    ) -> StatsUpdate:
        """Apply one answer and persist the new stats."""
        with self.store.mutate() as state:
            update = self.apply_answer(state, is_correct, difficulty_or_mode, item_key, mode, self.now())

        if update.new_badges:
            self.logger.info(f"[{self.name}] New badges: {update.new_badges}")
        if update.leveled_up:
            self.logger.info(f"[{self.name}] Level up: {update.stats.level}")
        return update

    def add_referral(self) -> ProgressStats:
        """Count a referred friend."""
        with self.store.mutate() as state:
            stats = state.progress_stats
            stats.referrals += 1
            stats.earned_badges = [badge.id for badge in get_earned_badges(stats)]
        return state.progress_stats

    def add_session_time(self, seconds: int) -> ProgressStats:
        """Accumulate time spent practicing."""
        with self.store.mutate() as state:
            state.progress_stats.total_session_time += max(0, int(seconds))
        return state.progress_stats

    def reset_stats(self) -> ProgressStats:
        with self.store.mutate() as state:
            state.progress_stats = ProgressStats()
        self.log_debug("Progress stats reset")
        return state.progress_stats

    # ==================== QUERIES ====================

    def get_stats(self) -> ProgressStats:
        return self.store.load().progress_stats

    def get_level_progress(self) -> LevelProgress:
        return get_level_progress(self.get_stats().total_points)

    def get_badges(self) -> list[dict]:
        """Every badge with its earned flag (registry order)."""
        earned = {badge.id for badge in get_earned_badges(self.get_stats())}
        return [
            {
                "id": badge.id,
                "name": badge.name,
                "description": badge.description,
                "icon": badge.icon,
                "earned": badge.id in earned,
            }
            for badge in BADGES
        ]

    def get_mastery_bucket(self, item_key: str) -> MasteryBucket:
        return self.get_stats().bucket_of(item_key)
