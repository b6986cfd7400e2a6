"""
Base model for persisted documents.
Fields are snake_case in Python and camelCase on disk.
"""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from vocabpro.utils.dates import ensure_aware


class StoredModel(BaseModel):
    """Base for every model that is part of the persisted AppState"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=False,
        extra="ignore",
    )

    @field_validator("*", mode="after")
    @classmethod
    def assume_utc(cls, value: Any) -> Any:
        # timestamps written without an offset are UTC
        if isinstance(value, datetime):
            return ensure_aware(value)
        return value

    def to_storage(self) -> dict:
        """Dump in the on-disk representation (camelCase, JSON types)."""
        return self.model_dump(mode="json", by_alias=True)
