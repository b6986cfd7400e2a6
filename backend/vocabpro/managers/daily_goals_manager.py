"""
Daily Goals Manager
Daily question/point targets, per-day history and the day streak.
"""
from datetime import date, datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field

from vocabpro.managers.base_manager import BaseManager
from vocabpro.models.goals import GOAL_PRESETS, DailyGoalRecord, GoalSpec
from vocabpro.models.state import AppState
from vocabpro.utils.dates import day_key, parse_day_key


class DayProgress(BaseModel):
    """One day of the weekly history"""
    date: date
    day_name: str
    questions_answered: int = 0
    points_earned: int = 0
    completed: bool = False


class TodayProgress(BaseModel):
    """Today's record against the active goal"""
    date: date
    goal: GoalSpec
    record: DailyGoalRecord
    percentage: float = Field(..., ge=0, le=100)
    streak: int


class DailyGoalsManager(BaseManager):
    """
    Daily Goals Manager.

    A day is complete once either the question or the point target is
    reached; completion is stamped once and never moved.
    """

    @property
    def name(self) -> str:
        return "daily_goals"

    @property
    def description(self) -> str:
        return "Tracks daily goal progress, weekly history and the day streak"

    # ==================== GOAL ====================

    def goal_for(self, state: AppState) -> GoalSpec:
        goals = state.daily_goals
        if goals.custom_goal is not None:
            return goals.custom_goal
        return GOAL_PRESETS.get(goals.goal_preset) or GOAL_PRESETS[self.settings.DAILY_GOAL_DEFAULT_PRESET]

    def get_goal(self) -> GoalSpec:
        return self.goal_for(self.store.load())

    def set_goal_preset(self, preset: str) -> GoalSpec:
        """Switch to a preset goal (clears any custom goal)."""
        if preset not in GOAL_PRESETS:
            raise ValueError(f"Unknown goal preset '{preset}'. Valid: {sorted(GOAL_PRESETS)}")
        with self.store.mutate() as state:
            state.daily_goals.goal_preset = preset
            state.daily_goals.custom_goal = None
            state.settings.daily_goal_preset = preset
        self.log_debug("Goal preset changed", {"preset": preset})
        return GOAL_PRESETS[preset]

    def set_custom_goal(self, questions: int, points: int) -> GoalSpec:
        """Use a custom goal; either threshold must be at least 1."""
        goal = GoalSpec(questions=questions, points=points)
        with self.store.mutate() as state:
            state.daily_goals.custom_goal = goal
        self.log_debug("Custom goal set", goal.model_dump())
        return goal

    # ==================== PROGRESS ====================

    def apply_progress(
        self,
        state: AppState,
        day: date,
        questions_delta: int,
        points_delta: int,
        now: datetime
    ) -> DailyGoalRecord:
        """
        Add activity to a day inside a draft state.

        Creates the day's record on first activity and stamps completion
        the first time a target is reached.
        """
        key = day_key(day)
        history = state.daily_goals.history
        record = history.get(key)
        if record is None:
            record = DailyGoalRecord(start_time=now)
            history[key] = record

        record.questions_answered += max(0, questions_delta)
        record.points_earned += max(0, points_delta)

        goal = self.goal_for(state)
        reached = (
            record.questions_answered >= goal.questions
            or record.points_earned >= goal.points
        )
        if reached and not record.completed:
            record.completed = True
            record.completed_at = now
            self.logger.info(f"[{self.name}] Daily goal completed for {key}")

        return record

    def update_progress(
        self,
        questions_delta: int,
        points_delta: int,
        day: Optional[date] = None
    ) -> DailyGoalRecord:
        """Add questions and points to a day (today by default)."""
        now = self.now()
        with self.store.mutate() as state:
            record = self.apply_progress(state, day or self.local_day(now), questions_delta, points_delta, now)
        return record

    def get_day(self, day: date) -> DailyGoalRecord:
        """Record of a day (empty, not stored, when there was no activity)."""
        record = self.store.load().daily_goals.history.get(day_key(day))
        return record or DailyGoalRecord()

    def get_progress_percentage(self, day: Optional[date] = None) -> float:
        """Best of question and point progress, capped at 100."""
        state = self.store.load()
        record = state.daily_goals.history.get(day_key(day or self.today())) or DailyGoalRecord()
        return self._percentage(record, self.goal_for(state))

    @staticmethod
    def _percentage(record: DailyGoalRecord, goal: GoalSpec) -> float:
        questions = record.questions_answered / goal.questions * 100
        points = record.points_earned / goal.points * 100
        return min(100.0, max(questions, points))

    def is_goal_complete(self, day: Optional[date] = None) -> bool:
        return self.get_day(day or self.today()).completed

    def get_today_progress(self) -> TodayProgress:
        state = self.store.load()
        today = self.today()
        record = state.daily_goals.history.get(day_key(today)) or DailyGoalRecord()
        goal = self.goal_for(state)
        return TodayProgress(
            date=today,
            goal=goal,
            record=record,
            percentage=self._percentage(record, goal),
            streak=self.streak_for(state, today),
        )

    # ==================== STREAK & HISTORY ====================

    def streak_for(self, state: AppState, today: date) -> int:
        """
        Consecutive completed days ending today or yesterday.

        Today does not have to be complete yet. Days bridged by a streak
        shield neither count nor break the run.
        """
        history = state.daily_goals.history
        protected = set(state.streak_shields.protected_dates)
        streak = 0

        for offset in range(self.settings.STREAK_LOOKBACK_DAYS + 1):
            key = day_key(today - timedelta(days=offset))
            record = history.get(key)
            if record is not None and record.completed:
                streak += 1
            elif key in protected or offset == 0:
                continue
            else:
                break

        return streak

    def streak_length(self, today: Optional[date] = None) -> int:
        return self.streak_for(self.store.load(), today or self.today())

    def get_week_history(self, today: Optional[date] = None) -> list[DayProgress]:
        """Last seven days, oldest first, empty days included."""
        today = today or self.today()
        history = self.store.load().daily_goals.history
        week = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            record = history.get(day_key(day)) or DailyGoalRecord()
            week.append(DayProgress(
                date=day,
                day_name=day.strftime("%a"),
                questions_answered=record.questions_answered,
                points_earned=record.points_earned,
                completed=record.completed,
            ))
        return week

    def cleanup_history(self, today: Optional[date] = None) -> int:
        """Drop days older than the retention window. Returns how many were removed."""
        cutoff = (today or self.today()) - timedelta(days=self.settings.DAILY_GOAL_RETENTION_DAYS)
        with self.store.mutate() as state:
            history = state.daily_goals.history
            stale = [
                key for key in history
                if (parse_day_key(key) or date.min) < cutoff
            ]
            for key in stale:
                del history[key]
        if stale:
            self.log_debug("Old daily goal entries removed", {"count": len(stale)})
        return len(stale)
