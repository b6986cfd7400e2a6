"""
Catalog Service
Read-only access to the static learning catalogs.

Raw records are validated once here into VocabItem, AcronymItem or
OneWordItem; malformed records are logged and skipped.
"""
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from vocabpro.config import Settings, get_settings
from vocabpro.models.catalog import Difficulty, LearningItem
from vocabpro.models.quiz import QuizMode
from vocabpro.utils.dates import day_seed


logger = logging.getLogger(__name__)

_item_adapter = TypeAdapter(LearningItem)

VOCABULARY_FILE = "vocabulary.json"
ACRONYMS_FILE = "acronyms.json"
ONEWORD_FILE = "oneword.json"


def parse_items(records: Iterable[Any], source: str, **extra: Any) -> list[LearningItem]:
    """Validate raw records, skipping the ones that do not form an item."""
    items: list[LearningItem] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning(f"Skipping non-object record #{index} in {source}")
            continue
        try:
            items.append(_item_adapter.validate_python({**record, **extra}))
        except ValidationError as e:
            logger.warning(f"Skipping invalid record #{index} in {source}: {e.error_count()} errors")
    return items


class CatalogService:
    """
    Catalog provider.

    Vocabulary is grouped by difficulty (easy/medium/hard); acronyms and
    one-word substitutes are single lists.
    """

    def __init__(
        self,
        vocabulary: Optional[dict[str, list[LearningItem]]] = None,
        acronyms: Optional[list[LearningItem]] = None,
        oneword: Optional[list[LearningItem]] = None
    ):
        self._vocabulary = vocabulary or {}
        self._acronyms = acronyms or []
        self._oneword = oneword or []

    @classmethod
    def from_records(
        cls,
        vocabulary: Optional[dict[str, list[dict]]] = None,
        acronyms: Optional[list[dict]] = None,
        oneword: Optional[list[dict]] = None
    ) -> "CatalogService":
        """Build a catalog from raw records (as found in the JSON files)."""
        grouped: dict[str, list[LearningItem]] = {}
        for difficulty, records in (vocabulary or {}).items():
            try:
                level = Difficulty(difficulty)
            except ValueError:
                logger.warning(f"Skipping unknown vocabulary difficulty '{difficulty}'")
                continue
            grouped[level.value] = parse_items(
                records or [], f"vocabulary[{level.value}]", kind="vocab", difficulty=level.value
            )
        return cls(
            vocabulary=grouped,
            acronyms=parse_items(acronyms or [], "acronyms", kind="acronym"),
            oneword=parse_items(oneword or [], "oneword", kind="oneword"),
        )

    @classmethod
    def from_directory(cls, directory: Path | str) -> "CatalogService":
        """Load the catalog JSON files from a directory; missing files are empty."""
        directory = Path(directory)

        def read(name: str, default: Any) -> Any:
            path = directory / name
            if not path.exists():
                logger.warning(f"Catalog file not found: {path}")
                return default
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Cannot read catalog file {path}: {e}")
                return default

        vocabulary = read(VOCABULARY_FILE, {})
        acronyms = read(ACRONYMS_FILE, [])
        oneword = read(ONEWORD_FILE, [])

        catalog = cls.from_records(
            vocabulary=vocabulary if isinstance(vocabulary, dict) else {},
            acronyms=acronyms if isinstance(acronyms, list) else [],
            oneword=oneword if isinstance(oneword, list) else [],
        )
        logger.info(f"Catalog loaded from {directory}: {catalog.counts()}")
        return catalog

    # ==================== QUERIES ====================

    def get_vocabulary(self, difficulty: Optional[str] = None) -> list[LearningItem]:
        """Vocabulary for one difficulty, or all of it."""
        if difficulty is None:
            return [item for items in self._vocabulary.values() for item in items]
        return list(self._vocabulary.get(difficulty, []))

    def get_acronyms(self) -> list[LearningItem]:
        return list(self._acronyms)

    def get_oneword(self) -> list[LearningItem]:
        return list(self._oneword)

    def get_items(self, mode: QuizMode, difficulty: Optional[str] = None) -> list[LearningItem]:
        """Candidate pool of a quiz mode."""
        if mode == QuizMode.ACRONYM:
            return self.get_acronyms()
        if mode == QuizMode.ONEWORD:
            return self.get_oneword()
        return self.get_vocabulary(difficulty)

    def all_items(self) -> list[LearningItem]:
        return [*self.get_vocabulary(), *self._acronyms, *self._oneword]

    def find(self, key: str) -> Optional[LearningItem]:
        """Item by key, None when unknown."""
        for item in self.all_items():
            if item.key == key:
                return item
        return None

    def word_of_the_day(self, day: date) -> Optional[LearningItem]:
        """Vocabulary item of a day; every learner gets the same one."""
        words = self.get_vocabulary()
        if not words:
            return None
        return words[day_seed(day) % len(words)]

    def counts(self) -> dict[str, int]:
        counts = {level: len(items) for level, items in self._vocabulary.items()}
        counts["acronym"] = len(self._acronyms)
        counts["oneword"] = len(self._oneword)
        return counts


def load_default_catalog(settings: Optional[Settings] = None) -> CatalogService:
    """Catalog from the configured data directory."""
    settings = settings or get_settings()
    return CatalogService.from_directory(settings.CATALOG_DIR)
