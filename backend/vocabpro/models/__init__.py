"""
Pydantic Models Module
Contains the catalog, review, progress, goal, quiz and persisted state models.
"""
from vocabpro.models.catalog import AcronymItem, Difficulty, ItemKind, LearningItem, OneWordItem, VocabItem
from vocabpro.models.review import ReviewEvent, ReviewRecord
from vocabpro.models.progress import MasteryBucket, ProgressStats
from vocabpro.models.goals import GOAL_PRESETS, DailyGoalRecord, DailyGoals, GoalSpec, StreakShields
from vocabpro.models.state import AppState, Bookmark, QuizHistoryEntry, UserSettings, WordOfTheDay, default_state
from vocabpro.models.quiz import AnswerResult, FlashcardDeck, Question, QuizAnswer, QuizMode, QuizSession

__all__ = [
    "AcronymItem", "Difficulty", "ItemKind", "LearningItem", "OneWordItem", "VocabItem",
    "ReviewEvent", "ReviewRecord",
    "MasteryBucket", "ProgressStats",
    "GOAL_PRESETS", "DailyGoalRecord", "DailyGoals", "GoalSpec", "StreakShields",
    "AppState", "Bookmark", "QuizHistoryEntry", "UserSettings", "WordOfTheDay", "default_state",
    "AnswerResult", "FlashcardDeck", "Question", "QuizAnswer", "QuizMode", "QuizSession"
]
