"""
Adaptive Practice Selection
Blends due, struggling and novel items into a practice set.

Selection order:
1. Top half of the requested count by due score (never-seen items first)
2. Up to 30% of the count from struggling items, largest deficit first
3. Random fill from the remaining catalog
The final list is shuffled so the learner cannot tell the groups apart.
"""
import logging
import math
import random
from datetime import datetime
from typing import Mapping, Optional, Sequence, TypeVar

from vocabpro.config import Settings, get_settings
from vocabpro.models.catalog import LearningItem
from vocabpro.models.review import ReviewRecord
from vocabpro.utils.srs_algorithm import SRSAlgorithm, srs_algorithm


logger = logging.getLogger(__name__)

T = TypeVar("T")


def shuffled(values: Sequence[T], rng: random.Random) -> list[T]:
    """Shuffled copy of a sequence."""
    result = list(values)
    rng.shuffle(result)
    return result


def sample(
    values: Sequence[T],
    count: int,
    rng: random.Random,
    exclude: Optional[set] = None
) -> list[T]:
    """Up to `count` distinct values drawn without replacement, skipping excluded ones."""
    excluded = exclude or set()
    candidates = list(dict.fromkeys(v for v in values if v not in excluded))
    return rng.sample(candidates, min(max(count, 0), len(candidates)))


def unique_by_key(items: Sequence[LearningItem]) -> list[LearningItem]:
    """First occurrence of each item key, catalog order preserved."""
    seen: dict[str, LearningItem] = {}
    for item in items:
        seen.setdefault(item.key, item)
    return list(seen.values())


def select_practice_set(
    catalog: Sequence[LearningItem],
    records: Mapping[str, ReviewRecord],
    count: int,
    now: datetime,
    rng: Optional[random.Random] = None,
    algorithm: Optional[SRSAlgorithm] = None,
    settings: Optional[Settings] = None
) -> list[LearningItem]:
    """
    Choose `count` distinct items for a practice run.

    Args:
        catalog: Candidate items (duplicated keys are collapsed)
        records: Review records by item key
        count: Desired number of items
        now: Current time for due scoring
        rng: Random source (module random if not provided)
        algorithm: SRS algorithm used for scoring

    Returns:
        Shuffled list of at most `count` items, fewer only when the
        catalog is smaller than `count`
    """
    rng = rng or random.Random()
    algorithm = algorithm or srs_algorithm
    settings = settings or get_settings()

    items = unique_by_key(catalog)
    if count <= 0 or not items:
        return []

    # 1. Due items, highest score first (stable for ties)
    due_count = math.ceil(count * settings.PRACTICE_DUE_RATIO)
    ranked = sorted(
        items,
        key=lambda item: algorithm.due_score(records.get(item.key), now),
        reverse=True
    )
    due = ranked[:due_count]

    # 2. Struggling items, largest deficit first
    struggling_count = math.ceil(count * settings.PRACTICE_STRUGGLING_RATIO)
    struggling = sorted(
        (item for item in items if algorithm.is_struggling(records.get(item.key))),
        key=lambda item: algorithm.deficit(records[item.key]),
        reverse=True
    )[:struggling_count]

    # 3. Merge, due first
    selected: list[LearningItem] = []
    selected_keys: set[str] = set()
    for item in [*due, *struggling]:
        if len(selected) >= count:
            break
        if item.key not in selected_keys:
            selected.append(item)
            selected_keys.add(item.key)

    # 4. Random fill without replacement
    remaining = [item for item in items if item.key not in selected_keys]
    needed = count - len(selected)
    if needed > 0 and remaining:
        selected.extend(rng.sample(remaining, min(needed, len(remaining))))

    logger.debug(
        f"Practice set: {len(selected)} items "
        f"(due={len(due)}, struggling={len(struggling)}, catalog={len(items)})"
    )

    # 5. Hide group order
    rng.shuffle(selected)
    return selected
