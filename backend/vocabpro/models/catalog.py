"""
Catalog Models
Learning items read from the static catalogs: vocabulary words, acronyms
and one-word substitutes.

Items are validated once at the catalog boundary into a tagged union so the
selector and question builder can match on kind instead of probing fields.
"""
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag


class ItemKind(str, Enum):
    """Catalog item kind"""
    VOCAB = "vocab"
    ACRONYM = "acronym"
    ONEWORD = "oneword"


class Difficulty(str, Enum):
    """Vocabulary difficulty band"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class _CatalogItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def key(self) -> str:
        """Stable identifier of the item (headword, acronym or phrase)."""
        raise NotImplementedError


class VocabItem(_CatalogItem):
    """Vocabulary word with definition, synonyms and antonyms"""
    kind: Literal["vocab"] = "vocab"
    word: str = Field(..., min_length=1)
    definition: Optional[str] = None
    pronunciation: Optional[str] = None
    synonyms: tuple[str, ...] = ()
    antonyms: tuple[str, ...] = ()
    example: Optional[str] = None
    exam: Optional[str] = Field(default=None, description="Exam the word is common in")
    difficulty: Optional[Difficulty] = None

    @property
    def key(self) -> str:
        return self.word


class AcronymItem(_CatalogItem):
    """Acronym and its expansion"""
    kind: Literal["acronym"] = "acronym"
    acronym: str = Field(..., min_length=1)
    full: str = Field(..., min_length=1)
    category: Optional[str] = None
    options: tuple[str, ...] = ()
    distractors: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return self.acronym


class OneWordItem(_CatalogItem):
    """Phrase to be replaced by a single word"""
    kind: Literal["oneword"] = "oneword"
    phrase: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    options: tuple[str, ...] = ()
    distractors: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return self.phrase


def _item_kind(value: Any) -> Optional[str]:
    """Infer the union tag from a raw record when `kind` is absent."""
    if isinstance(value, BaseModel):
        return getattr(value, "kind", None)
    if not isinstance(value, dict):
        return None
    if value.get("kind"):
        return value["kind"]
    if "acronym" in value:
        return ItemKind.ACRONYM.value
    if "phrase" in value:
        return ItemKind.ONEWORD.value
    if "word" in value:
        return ItemKind.VOCAB.value
    return None


LearningItem = Annotated[
    Union[
        Annotated[VocabItem, Tag("vocab")],
        Annotated[AcronymItem, Tag("acronym")],
        Annotated[OneWordItem, Tag("oneword")],
    ],
    Discriminator(_item_kind),
]
