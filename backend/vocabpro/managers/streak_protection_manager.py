"""
Streak Protection Manager
Shield economy: passive weekly shields, spending, and bridging a missed day.
"""
from datetime import date, datetime, timedelta
from typing import Optional

from pydantic import BaseModel

from vocabpro.managers.base_manager import BaseManager
from vocabpro.models.goals import StreakShields
from vocabpro.utils.dates import day_key


class StreakCheck(BaseModel):
    """Whether a streak is intact, bridged, or bridgeable"""
    protected: bool = False
    shields_remaining: int = 0
    can_protect: bool = False
    missed_days: int = 0


class StreakProtectionManager(BaseManager):
    """
    Streak Protection Manager.

    A shield bridges exactly one missed day, and each missed day is
    bridged at most once. Gaps of two or more days cannot be bridged.
    """

    @property
    def name(self) -> str:
        return "streak_protection"

    @property
    def description(self) -> str:
        return "Awards, spends and applies streak shields"

    # ==================== ECONOMY ====================

    def apply_passive_award(self, shields: StreakShields, now: datetime) -> int:
        """
        Grant the shields earned since the last award, in place.

        One shield per whole period elapsed since last_earned_at, up to the
        passive cap. The first call only starts the clock. Returns the
        number of shields granted.
        """
        if shields.last_earned_at is None:
            shields.last_earned_at = now
            return 0

        period = timedelta(days=self.settings.SHIELD_EARN_PERIOD_DAYS)
        periods = int((now - shields.last_earned_at) / period)
        cap = self.settings.SHIELD_PASSIVE_CAP
        if periods < 1 or shields.count >= cap:
            return 0

        granted = min(periods, cap - shields.count)
        shields.count += granted
        shields.last_earned_at = shields.last_earned_at + periods * period
        return granted

    def get_shields(self) -> int:
        """Current shield count, after any passive award."""
        now = self.now()
        state = self.store.load()
        shields = state.streak_shields
        before = shields.model_copy(deep=True)
        granted = self.apply_passive_award(shields, now)

        if shields != before:
            with self.store.mutate() as draft:
                draft.streak_shields = shields
        if granted:
            self.logger.info(f"[{self.name}] Earned {granted} shield(s), now {shields.count}")
        return shields.count

    def use_shield(self) -> bool:
        """Spend one shield. Returns False when none are left."""
        with self.store.mutate() as state:
            shields = state.streak_shields
            if shields.count <= 0:
                return False
            self._spend(shields)
        self.log_debug("Shield used", {"remaining": shields.count})
        return True

    def _spend(self, shields: StreakShields) -> None:
        shields.count -= 1
        shields.last_used_at = self.now()
        shields.total_used += 1

    def add_shields(self, amount: int) -> int:
        """Grant shields (rewards, purchases), capped at the absolute maximum."""
        if amount < 0:
            raise ValueError("Shield amount must not be negative")
        with self.store.mutate() as state:
            shields = state.streak_shields
            shields.count = min(self.settings.SHIELD_MAX, shields.count + amount)
        return shields.count

    def get_state(self) -> StreakShields:
        return self.store.load().streak_shields

    # ==================== STREAK GAPS ====================

    def check_streak(self, last_active_day: Optional[date], today: Optional[date] = None) -> StreakCheck:
        """
        Inspect the gap between the last active day and today.

        Args:
            last_active_day: Most recent day with activity, None if never active
            today: Reference day (clock's today by default)
        """
        today = today or self.today()
        shields = self.get_shields()
        if last_active_day is None:
            return StreakCheck(shields_remaining=shields)

        missed = (today - last_active_day).days - 1
        if missed <= 0:
            return StreakCheck(protected=True, shields_remaining=shields)

        if missed == 1:
            gap_key = day_key(last_active_day + timedelta(days=1))
            if gap_key in self.get_state().protected_dates:
                return StreakCheck(protected=True, shields_remaining=shields, missed_days=missed)
            return StreakCheck(shields_remaining=shields, can_protect=shields > 0, missed_days=missed)

        return StreakCheck(shields_remaining=shields, missed_days=missed)

    def protect_gap(self, last_active_day: Optional[date], today: Optional[date] = None) -> StreakCheck:
        """Spend a shield on a single missed day, if that gap can be bridged."""
        today = today or self.today()
        check = self.check_streak(last_active_day, today)
        if not check.can_protect:
            return check

        gap_key = day_key(last_active_day + timedelta(days=1))
        with self.store.mutate() as state:
            shields = state.streak_shields
            self._spend(shields)
            shields.protected_dates.append(gap_key)

        self.logger.info(f"[{self.name}] Shield bridged missed day {gap_key}")
        return StreakCheck(
            protected=True,
            shields_remaining=shields.count,
            can_protect=False,
            missed_days=check.missed_days,
        )

    def last_active_day(self) -> Optional[date]:
        """Day of the most recent answer, from the progress stats."""
        last_played = self.store.load().progress_stats.last_played_at
        return self.local_day(last_played) if last_played else None
