"""
Quiz History Manager
Summaries of completed quizzes, newest first.
"""
import uuid
from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel, Field

from vocabpro.managers.base_manager import BaseManager
from vocabpro.models.state import QuizHistoryEntry
from vocabpro.utils.srs_algorithm import round_half_up


class HistoryBreakdown(BaseModel):
    """Totals for one mode or difficulty"""
    quizzes: int = 0
    correct: int = 0
    total: int = 0


class HistoryDay(BaseModel):
    """Quiz totals for one day"""
    date: date
    day_name: str
    quizzes: int = 0
    questions: int = 0
    correct: int = 0
    score: int = 0


class QuizHistoryStats(BaseModel):
    """Aggregate over the stored quiz history"""
    total_quizzes: int = 0
    total_questions: int = 0
    total_correct: int = 0
    total_score: int = 0
    average_accuracy: int = 0
    by_mode: dict[str, HistoryBreakdown] = Field(default_factory=dict)
    by_difficulty: dict[str, HistoryBreakdown] = Field(default_factory=dict)
    last_7_days: list[HistoryDay] = Field(default_factory=list)


def accuracy_percent(correct: int, total: int) -> int:
    """Rounded percentage, 0 when nothing was answered."""
    if total <= 0:
        return 0
    return round_half_up(correct / total * 100)


class QuizHistoryManager(BaseManager):
    """Quiz History Manager - keeps the most recent quiz summaries."""

    @property
    def name(self) -> str:
        return "quiz_history"

    @property
    def description(self) -> str:
        return "Records completed quizzes and summarizes them"

    def add(
        self,
        mode: str,
        questions_total: int,
        questions_correct: int,
        score: int,
        difficulty: Optional[str] = None,
        time_spent: int = 0,
        words: Optional[list[str]] = None
    ) -> QuizHistoryEntry:
        """Store a finished quiz at the front of the history."""
        entry = QuizHistoryEntry(
            id=uuid.uuid4().hex,
            date=self.now(),
            mode=mode,
            difficulty=difficulty,
            questions_total=questions_total,
            questions_correct=questions_correct,
            score=score,
            accuracy=accuracy_percent(questions_correct, questions_total),
            time_spent=max(0, time_spent),
            words=list(words or []),
        )
        with self.store.mutate() as state:
            state.quiz_history.insert(0, entry)
            del state.quiz_history[self.settings.QUIZ_HISTORY_MAX:]

        self.log_debug("Quiz added to history", {"id": entry.id, "accuracy": entry.accuracy})
        return entry

    def get(self, entry_id: str) -> Optional[QuizHistoryEntry]:
        for entry in self.store.load().quiz_history:
            if entry.id == entry_id:
                return entry
        return None

    def recent(self, count: int = 10) -> list[QuizHistoryEntry]:
        return self.store.load().quiz_history[:max(0, count)]

    def clear(self) -> None:
        with self.store.mutate() as state:
            state.quiz_history = []
        self.log_debug("Quiz history cleared")

    def get_stats(self, today: Optional[date] = None) -> QuizHistoryStats:
        """Totals, per-mode and per-difficulty breakdowns and the last seven days."""
        history = self.store.load().quiz_history
        today = today or self.today()
        stats = QuizHistoryStats(total_quizzes=len(history))

        for entry in history:
            stats.total_questions += entry.questions_total
            stats.total_correct += entry.questions_correct
            stats.total_score += entry.score

            groups = [stats.by_mode.setdefault(entry.mode, HistoryBreakdown())]
            if entry.difficulty:
                groups.append(stats.by_difficulty.setdefault(entry.difficulty, HistoryBreakdown()))
            for group in groups:
                group.quizzes += 1
                group.correct += entry.questions_correct
                group.total += entry.questions_total

        stats.average_accuracy = accuracy_percent(stats.total_correct, stats.total_questions)

        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            entries = [e for e in history if self.local_day(e.date) == day]
            stats.last_7_days.append(HistoryDay(
                date=day,
                day_name=day.strftime("%a"),
                quizzes=len(entries),
                questions=sum(e.questions_total for e in entries),
                correct=sum(e.questions_correct for e in entries),
                score=sum(e.score for e in entries),
            ))

        return stats
