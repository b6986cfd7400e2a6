"""
Gamification System
Points, levels, badges, answer streaks and the mastery state machine.

Every function here is pure: stats go in, new stats come out.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel, Field

from vocabpro.models.progress import (
    LEVEL_BAND_POINTS,
    MAX_LEVEL,
    MasteryBucket,
    ProgressStats,
    level_for_points,
)


# ==================== LEVELS ====================

class LevelInfo(BaseModel):
    """One level band"""
    level: int
    name: str
    min_points: int
    max_points: Optional[int] = Field(default=None, description="None for the open top band")
    badge: str


_LEVEL_NAMES = [
    ("Beginner", "🌱"),
    ("Novice", "📚"),
    ("Learner", "🎓"),
    ("Explorer", "🔍"),
    ("Achiever", "🏆"),
    ("Expert", "⭐"),
    ("Master", "👑"),
    ("Virtuoso", "💎"),
    ("Champion", "🏅"),
    ("Legend", "🔥"),
]

LEVEL_CONFIG: list[LevelInfo] = [
    LevelInfo(
        level=i + 1,
        name=name,
        min_points=i * LEVEL_BAND_POINTS,
        max_points=(i + 1) * LEVEL_BAND_POINTS - 1 if i + 1 < MAX_LEVEL else None,
        badge=badge,
    )
    for i, (name, badge) in enumerate(_LEVEL_NAMES)
]


class LevelProgress(BaseModel):
    """Progress towards the next level"""
    current_level: LevelInfo
    next_level: LevelInfo
    progress: float = Field(..., ge=0, le=100, description="Percent of the band completed")
    points_to_next: int
    is_max_level: bool


def get_level_info(total_points: int) -> LevelInfo:
    """Level band containing a points total."""
    return LEVEL_CONFIG[level_for_points(total_points) - 1]


def get_level_progress(total_points: int) -> LevelProgress:
    """Current band, next band and percent progress between them."""
    current = get_level_info(total_points)
    is_max = current.level == MAX_LEVEL
    nxt = current if is_max else LEVEL_CONFIG[current.level]

    needed = nxt.min_points - current.min_points
    progress = (total_points - current.min_points) / needed * 100 if needed > 0 else 100.0

    return LevelProgress(
        current_level=current,
        next_level=nxt,
        progress=min(progress, 100.0),
        points_to_next=max(0, nxt.min_points - total_points),
        is_max_level=is_max,
    )


# ==================== BADGES ====================

@dataclass(frozen=True)
class Badge:
    """Achievement with a pure predicate over ProgressStats"""
    id: str
    name: str
    description: str
    icon: str
    condition: Callable[[ProgressStats], bool]


def _accuracy_at_least(min_answered: int, ratio: float) -> Callable[[ProgressStats], bool]:
    return lambda s: s.total_answered >= min_answered and s.accuracy_ratio >= ratio


BADGES: tuple[Badge, ...] = (
    Badge("first_word", "First Steps", "Answer your first question correctly", "🎯",
          lambda s: s.correct_answers >= 1),
    Badge("word_master_10", "Word Collector", "Master 10 words", "📖",
          lambda s: s.mastered_words >= 10),
    Badge("word_master_50", "Vocabulary Builder", "Master 50 words", "📚",
          lambda s: s.mastered_words >= 50),
    Badge("word_master_100", "Word Wizard", "Master 100 words", "🧙",
          lambda s: s.mastered_words >= 100),
    Badge("word_master_250", "Lexicon Legend", "Master 250 words", "👑",
          lambda s: s.mastered_words >= 250),
    Badge("word_master_500", "Vocabulary Virtuoso", "Master 500 words", "💎",
          lambda s: s.mastered_words >= 500),

    Badge("streak_5", "On Fire", "Get 5 correct answers in a row", "🔥",
          lambda s: s.max_streak >= 5),
    Badge("streak_10", "Hot Streak", "Get 10 correct answers in a row", "🌟",
          lambda s: s.max_streak >= 10),
    Badge("streak_20", "Unstoppable", "Get 20 correct answers in a row", "⚡",
          lambda s: s.max_streak >= 20),
    Badge("streak_50", "Phenomenal", "Get 50 correct answers in a row", "💫",
          lambda s: s.max_streak >= 50),

    Badge("points_100", "Century", "Earn 100 points", "💯",
          lambda s: s.total_points >= 100),
    Badge("points_500", "Half Thousand", "Earn 500 points", "🎊",
          lambda s: s.total_points >= 500),
    Badge("points_1000", "Millennium", "Earn 1000 points", "🏆",
          lambda s: s.total_points >= 1000),
    Badge("points_2500", "Elite Scorer", "Earn 2500 points", "🥇",
          lambda s: s.total_points >= 2500),
    Badge("points_5000", "Grand Master", "Earn 5000 points", "👑",
          lambda s: s.total_points >= 5000),

    Badge("questions_50", "Curious Mind", "Answer 50 questions", "🤔",
          lambda s: s.total_answered >= 50),
    Badge("questions_100", "Dedicated Learner", "Answer 100 questions", "📝",
          lambda s: s.total_answered >= 100),
    Badge("questions_250", "Quiz Master", "Answer 250 questions", "🎓",
          lambda s: s.total_answered >= 250),
    Badge("questions_500", "Knowledge Seeker", "Answer 500 questions", "🔍",
          lambda s: s.total_answered >= 500),
    Badge("questions_1000", "Eternal Student", "Answer 1000 questions", "📚",
          lambda s: s.total_answered >= 1000),

    Badge("accuracy_50", "Good Start", "Maintain 50% accuracy (min 20 questions)", "✅",
          _accuracy_at_least(20, 0.5)),
    Badge("accuracy_75", "Sharp Mind", "Maintain 75% accuracy (min 50 questions)", "🎯",
          _accuracy_at_least(50, 0.75)),
    Badge("accuracy_90", "Perfection", "Maintain 90% accuracy (min 100 questions)", "⭐",
          _accuracy_at_least(100, 0.9)),

    Badge("referral", "Social Butterfly", "Refer a friend", "🦋",
          lambda s: s.referrals >= 1),
    Badge("all_modes", "Jack of All Trades", "Try all quiz modes", "🎭",
          lambda s: s.modes_played >= 5),
)

BADGES_BY_ID: dict[str, Badge] = {badge.id: badge for badge in BADGES}


def get_earned_badges(stats: ProgressStats) -> list[Badge]:
    """Every badge whose predicate currently holds (registry order)."""
    return [badge for badge in BADGES if badge.condition(stats)]


def get_new_badges(stats: ProgressStats, previous_badges: list[str]) -> list[Badge]:
    """Earned badges not present in a previously known id list."""
    known = set(previous_badges)
    return [badge for badge in get_earned_badges(stats) if badge.id not in known]


# ==================== POINTS & STREAKS ====================

POINTS_CONFIG: dict[str, int] = {
    "easy": 10,
    "medium": 15,
    "hard": 20,
    "acronym": 12,
    "oneword": 12,
}
DEFAULT_POINTS = 10
MAX_STREAK_BONUS = 10


def calculate_points(difficulty_or_mode: Optional[str], streak: int = 0) -> int:
    """Base points for the difficulty or mode plus a streak bonus (max 10)."""
    base = POINTS_CONFIG.get(difficulty_or_mode or "", DEFAULT_POINTS)
    return base + min(max(streak, 0), MAX_STREAK_BONUS)


def update_streak(is_correct: bool, current_streak: int) -> int:
    return current_streak + 1 if is_correct else 0


def get_performance_grade(accuracy: float) -> dict:
    """Letter grade and message for a quiz accuracy percentage."""
    if accuracy >= 90:
        return {"grade": "A+", "message": "Outstanding!"}
    if accuracy >= 80:
        return {"grade": "A", "message": "Excellent!"}
    if accuracy >= 70:
        return {"grade": "B", "message": "Good!"}
    if accuracy >= 60:
        return {"grade": "C", "message": "Fair"}
    if accuracy >= 50:
        return {"grade": "D", "message": "Needs Improvement"}
    return {"grade": "F", "message": "Keep Practicing!"}


# ==================== MASTERY STATE MACHINE ====================

def next_bucket(current: MasteryBucket, is_correct: bool) -> MasteryBucket:
    """
    Mastery transition for one answer.

    Correct: Unseen/Struggling -> Learning -> Mastered (Mastered stays).
    Incorrect: Mastered -> Learning -> Struggling (Unseen goes to Struggling).
    """
    if is_correct:
        if current == MasteryBucket.LEARNING:
            return MasteryBucket.MASTERED
        if current == MasteryBucket.MASTERED:
            return MasteryBucket.MASTERED
        return MasteryBucket.LEARNING

    if current == MasteryBucket.MASTERED:
        return MasteryBucket.LEARNING
    return MasteryBucket.STRUGGLING


def _move_item(stats: ProgressStats, item_key: str, bucket: MasteryBucket) -> None:
    lists = {
        MasteryBucket.MASTERED: stats.mastered_words_list,
        MasteryBucket.LEARNING: stats.learning_words_list,
        MasteryBucket.STRUGGLING: stats.struggling_words_list,
    }
    for target, words in lists.items():
        if target != bucket and item_key in words:
            words.remove(item_key)
    if bucket in lists and item_key not in lists[bucket]:
        lists[bucket].append(item_key)


class StatsUpdate(BaseModel):
    """Result of applying one answer to ProgressStats"""
    stats: ProgressStats
    points_awarded: int
    new_badges: list[str] = Field(default_factory=list)
    leveled_up: bool = False
    bucket: MasteryBucket


def update_stats(
    stats: ProgressStats,
    is_correct: bool,
    difficulty_or_mode: Optional[str],
    item_key: Optional[str],
    mode: Optional[str],
    now: datetime
) -> StatsUpdate:
    """
    Apply one answered question to the learner statistics.

    Args:
        stats: Current statistics (left untouched)
        is_correct: Whether the answer was correct
        difficulty_or_mode: Points key (easy/medium/hard/acronym/oneword)
        item_key: Key of the answered item, None to skip mastery tracking
        mode: Quiz mode played
        now: Answer time

    Returns:
        StatsUpdate with the new stats, points and newly earned badge ids
    """
    new_stats = stats.model_copy(deep=True)
    previous_level = stats.level
    streak_before = stats.current_streak

    new_stats.total_answered += 1
    points = 0
    if is_correct:
        new_stats.correct_answers += 1
        points = calculate_points(difficulty_or_mode, streak_before)
        new_stats.total_points += points

    new_stats.current_streak = update_streak(is_correct, streak_before)
    new_stats.max_streak = max(new_stats.max_streak, new_stats.current_streak)

    bucket = MasteryBucket.UNSEEN
    if item_key:
        bucket = next_bucket(new_stats.bucket_of(item_key), is_correct)
        _move_item(new_stats, item_key, bucket)

    if mode and mode not in new_stats.modes_played_list:
        new_stats.modes_played_list.append(mode)

    new_stats.last_played_at = now

    # Always the full set of satisfied predicates
    earned = [badge.id for badge in get_earned_badges(new_stats)]
    new_badges = [badge_id for badge_id in earned if badge_id not in stats.earned_badges]
    new_stats.earned_badges = earned

    return StatsUpdate(
        stats=new_stats,
        points_awarded=points,
        new_badges=new_badges,
        leveled_up=new_stats.level > previous_level,
        bucket=bucket,
    )
