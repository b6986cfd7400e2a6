"""
Question Builder
Turns selected catalog items into multiple-choice questions.

Items that lack what a mode needs (no definition, no synonyms, ...) are
skipped instead of producing a malformed question.
"""
import logging
import random
from typing import Callable, Optional, Sequence

from vocabpro.models.catalog import AcronymItem, LearningItem, OneWordItem, VocabItem
from vocabpro.models.quiz import Question, QuizMode
from vocabpro.utils.practice_selection import sample, shuffled


logger = logging.getLogger(__name__)

DISTRACTOR_COUNT = 3


def _has_definition(item: LearningItem) -> bool:
    return isinstance(item, VocabItem) and bool(item.definition)


def _has_synonyms(item: LearningItem) -> bool:
    return isinstance(item, VocabItem) and bool(item.synonyms)


def _has_antonyms(item: LearningItem) -> bool:
    return isinstance(item, VocabItem) and bool(item.antonyms)


def _is_acronym(item: LearningItem) -> bool:
    return isinstance(item, AcronymItem)


def _is_oneword(item: LearningItem) -> bool:
    return isinstance(item, OneWordItem)


MODE_REQUIREMENTS: dict[QuizMode, Callable[[LearningItem], bool]] = {
    QuizMode.VOCAB: _has_definition,
    QuizMode.SYNONYM: _has_synonyms,
    QuizMode.ANTONYM: _has_antonyms,
    QuizMode.ACRONYM: _is_acronym,
    QuizMode.ONEWORD: _is_oneword,
}


def eligible_items(mode: QuizMode, items: Sequence[LearningItem]) -> list[LearningItem]:
    """Items that can produce a question in the given mode."""
    accepts = MODE_REQUIREMENTS[mode]
    eligible = [item for item in items if accepts(item)]
    skipped = len(items) - len(eligible)
    if skipped:
        logger.debug(f"Skipped {skipped} items not usable in {mode.value} mode")
    return eligible


def _fixed_options(correct: str, options: Sequence[str], distractors: Sequence[str]) -> list[str]:
    """Options stored with the item, the correct answer always included once."""
    if options:
        others = [o for o in options if o != correct]
    else:
        others = [d for d in distractors if d != correct]
    return [correct, *dict.fromkeys(others)]


def build_question(
    mode: QuizMode,
    item: LearningItem,
    pool: Sequence[LearningItem],
    rng: random.Random
) -> Optional[Question]:
    """
    Build one question for an item.

    Args:
        mode: Quiz mode
        item: Item being asked
        pool: Catalog the distractors are drawn from
        rng: Random source

    Returns:
        Question, or None if the item cannot be asked in this mode
    """
    if not MODE_REQUIREMENTS[mode](item):
        return None

    others = [other for other in pool if other.key != item.key]

    if mode == QuizMode.VOCAB:
        correct = item.definition
        definitions = [o.definition for o in others if isinstance(o, VocabItem) and o.definition]
        options = [correct, *sample(definitions, DISTRACTOR_COUNT, rng, exclude={correct})]
        prompt = f'What is the meaning of "{item.word}"?'

    elif mode in (QuizMode.SYNONYM, QuizMode.ANTONYM):
        field = "synonyms" if mode == QuizMode.SYNONYM else "antonyms"
        own = set(getattr(item, field))
        correct = rng.choice(getattr(item, field))
        candidates = [
            value
            for other in others if isinstance(other, VocabItem)
            for value in getattr(other, field)
        ]
        options = [correct, *sample(candidates, DISTRACTOR_COUNT, rng, exclude=own)]
        prompt = item.word

    elif mode == QuizMode.ACRONYM:
        correct = item.full
        options = _fixed_options(correct, item.options, item.distractors)
        prompt = item.acronym

    else:
        correct = item.answer
        options = _fixed_options(correct, item.options, item.distractors)
        prompt = item.phrase

    if len(options) < 2:
        logger.debug(f"Not enough options for '{item.key}' in {mode.value} mode")
        return None

    return Question(
        item_key=item.key,
        mode=mode,
        prompt=prompt,
        options=shuffled(options, rng),
        correct=correct,
        item=item,
    )


def build_questions(
    mode: QuizMode,
    items: Sequence[LearningItem],
    pool: Sequence[LearningItem],
    rng: random.Random
) -> list[Question]:
    """Questions for every usable item, in the given order."""
    questions = []
    for item in items:
        question = build_question(mode, item, pool, rng)
        if question is not None:
            questions.append(question)
    return questions
