"""
Quiz Service
Runs quiz sessions and flashcard reviews on top of the core managers.

Answer data flow (one store mutation per answer):
1. Review record updated with the quality from correctness and latency
2. Progress stats updated (points, streak, mastery bucket, badges)
3. Today's daily goal record updated with the question and its points
"""
import logging
import random
import threading
import uuid
from typing import Optional

from vocabpro.config import Settings
from vocabpro.managers.daily_goals_manager import DailyGoalsManager
from vocabpro.managers.progress_manager import ProgressManager
from vocabpro.managers.quiz_history_manager import QuizHistoryManager
from vocabpro.managers.review_manager import ReviewManager
from vocabpro.models.catalog import Difficulty
from vocabpro.models.quiz import AnswerResult, FlashcardDeck, QuizAnswer, QuizMode, QuizSession
from vocabpro.models.review import ReviewRecord
from vocabpro.models.state import QuizHistoryEntry
from vocabpro.services.catalog_service import CatalogService
from vocabpro.services.storage_service import AppStateStore
from vocabpro.utils.dates import day_key
from vocabpro.utils.practice_selection import select_practice_set
from vocabpro.utils.question_builder import build_questions, eligible_items


logger = logging.getLogger(__name__)


class QuizError(Exception):
    """Quiz request that cannot be served"""
    pass


class SessionNotFoundError(QuizError):
    pass


class ItemNotFoundError(QuizError):
    pass


class QuizService:
    """
    Quiz Service.

    Sessions live in memory only; everything they change is written
    through the store.
    """

    def __init__(
        self,
        store: AppStateStore,
        catalog: CatalogService,
        rng: Optional[random.Random] = None,
        settings: Optional[Settings] = None
    ):
        self.store = store
        self.catalog = catalog
        self.settings = settings or store.settings
        self.rng = rng or random.Random()

        self.review = ReviewManager(store, settings=self.settings)
        self.progress = ProgressManager(store, settings=self.settings)
        self.goals = DailyGoalsManager(store, settings=self.settings)
        self.history = QuizHistoryManager(store, settings=self.settings)

        self._sessions: dict[str, QuizSession] = {}
        self._lock = threading.Lock()

    # ==================== SELECTION ====================

    def _candidates(self, mode: QuizMode, difficulty: Optional[str]):
        if mode.needs_difficulty:
            if difficulty is None:
                raise QuizError(f"Mode '{mode.value}' requires a difficulty")
            valid = [d.value for d in Difficulty]
            if difficulty not in valid:
                raise QuizError(f"Unknown difficulty '{difficulty}'. Valid: {valid}")
        else:
            difficulty = None

        pool = self.catalog.get_items(mode, difficulty)
        return difficulty, pool, eligible_items(mode, pool)

    def _select(self, candidates, count: int):
        state = self.store.load()
        return select_practice_set(
            candidates,
            state.review_records,
            count,
            self.store.clock(),
            rng=self.rng,
            algorithm=self.review.algorithm,
            settings=self.settings,
        )

    # ==================== QUIZ SESSIONS ====================

    def start_quiz(
        self,
        mode: QuizMode,
        difficulty: Optional[str] = None,
        count: Optional[int] = None
    ) -> QuizSession:
        """
        Start a quiz from the adaptive practice set.

        Args:
            mode: Quiz mode
            difficulty: easy/medium/hard (vocabulary modes only)
            count: Number of questions (QUIZ_LENGTH by default)

        Returns:
            New quiz session

        Raises:
            QuizError: Missing difficulty or no usable items
        """
        count = count or self.settings.QUIZ_LENGTH
        difficulty, pool, candidates = self._candidates(mode, difficulty)

        items = self._select(candidates, count)
        questions = build_questions(mode, items, pool, self.rng)
        if not questions:
            raise QuizError(f"No questions available for mode '{mode.value}'")

        session = QuizSession(
            id=uuid.uuid4().hex,
            mode=mode,
            difficulty=difficulty,
            questions=questions,
            started_at=self.store.clock(),
        )
        with self._lock:
            self._sessions[session.id] = session

        logger.info(f"Quiz {session.id} started: {mode.value}/{difficulty} with {len(questions)} questions")
        return session

    def get_session(self, session_id: str) -> QuizSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Quiz session '{session_id}' not found")
        return session

    def submit_answer(
        self,
        session_id: str,
        question_index: int,
        selected: str,
        response_time_ms: Optional[int] = None
    ) -> AnswerResult:
        """
        Answer one question of a session.

        Raises:
            SessionNotFoundError: Unknown session
            QuizError: Question out of range or already answered
        """
        session = self.get_session(session_id)
        if not 0 <= question_index < len(session.questions):
            raise QuizError(f"Question {question_index} is out of range")
        if session.is_answered(question_index):
            raise QuizError(f"Question {question_index} was already answered")

        question = session.questions[question_index]
        is_correct = selected == question.correct
        quality = self.review.algorithm.quality_from_response(is_correct, response_time_ms)
        points_key = session.difficulty if session.mode.needs_difficulty else session.mode.value
        now = self.store.clock()
        local_day = self.goals.local_day(now)

        with self.store.mutate() as state:
            today = state.daily_goals.history.get(day_key(local_day))
            was_completed = today is not None and today.completed

            record = self.review.apply_answer(state, question.item_key, quality, now)
            update = self.progress.apply_answer(
                state, is_correct, points_key, question.item_key, session.mode.value, now
            )
            day = self.goals.apply_progress(state, local_day, 1, update.points_awarded, now)

        session.answers.append(QuizAnswer(
            question_index=question_index,
            selected=selected,
            is_correct=is_correct,
            response_time_ms=response_time_ms,
            points_awarded=update.points_awarded,
        ))

        if update.new_badges:
            logger.info(f"New badges earned: {update.new_badges}")

        return AnswerResult(
            item_key=question.item_key,
            is_correct=is_correct,
            correct_answer=question.correct,
            quality=quality,
            points_awarded=update.points_awarded,
            current_streak=update.stats.current_streak,
            total_points=update.stats.total_points,
            level=update.stats.level,
            leveled_up=update.leveled_up,
            new_badges=update.new_badges,
            bucket=update.bucket,
            next_review_at=record.next_review_at,
            daily_goal_completed=day.completed and not was_completed,
        )

    def complete_quiz(self, session_id: str, time_spent: Optional[int] = None) -> QuizHistoryEntry:
        """
        Finish a session and store its summary in the quiz history.

        Args:
            session_id: Session to finish
            time_spent: Seconds spent (elapsed time since start by default)
        """
        session = self.get_session(session_id)
        now = self.store.clock()
        if time_spent is None:
            time_spent = int((now - session.started_at).total_seconds())

        session.completed_at = now
        entry = self.history.add(
            mode=session.mode.value,
            questions_total=len(session.questions),
            questions_correct=session.correct_count,
            score=session.score,
            difficulty=session.difficulty,
            time_spent=time_spent,
            words=[q.item_key for q in session.questions],
        )
        self.progress.add_session_time(time_spent)

        with self._lock:
            self._sessions.pop(session_id, None)

        logger.info(f"Quiz {session_id} completed: {entry.questions_correct}/{entry.questions_total}")
        return entry

    def abandon_quiz(self, session_id: str) -> bool:
        """Drop a session without recording it. Answers already given stay applied."""
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    # ==================== FLASHCARDS ====================

    def start_flashcards(
        self,
        mode: QuizMode,
        difficulty: Optional[str] = None,
        count: Optional[int] = None
    ) -> FlashcardDeck:
        """Flashcard deck drawn from the adaptive practice set."""
        count = count or self.settings.FLASHCARD_DECK_SIZE
        difficulty, _, candidates = self._candidates(mode, difficulty)
        cards = self._select(candidates, count)
        return FlashcardDeck(mode=mode, difficulty=difficulty, cards=cards)

    def review_flashcard(self, item_key: str, know: bool) -> ReviewRecord:
        """
        Schedule a flashcard answer.

        "Know" counts as a correct answer after FLASHCARD_KNOW_RESPONSE_MS,
        "don't know" as an incorrect one after FLASHCARD_DONT_KNOW_RESPONSE_MS.
        """
        if self.catalog.find(item_key) is None:
            raise ItemNotFoundError(f"Item '{item_key}' not found in catalog")

        response_time_ms = (
            self.settings.FLASHCARD_KNOW_RESPONSE_MS if know
            else self.settings.FLASHCARD_DONT_KNOW_RESPONSE_MS
        )
        return self.review.record_answer(item_key, know, response_time_ms)
