"""
Settings Manager
Learner preferences stored in the app state.
"""
from typing import Any

from pydantic import ValidationError

from vocabpro.managers.base_manager import BaseManager
from vocabpro.models.state import UserSettings


class SettingsManager(BaseManager):
    """
    Settings Manager.

    Keys may be given in snake_case or in the stored camelCase form.
    Unknown keys and badly typed values raise ValueError.
    """

    @property
    def name(self) -> str:
        return "settings"

    @property
    def description(self) -> str:
        return "Reads and updates learner preferences"

    def get_settings(self) -> UserSettings:
        return self.store.load().settings

    def get(self, key: str) -> Any:
        return getattr(self.get_settings(), self._field_name(key))

    def set(self, key: str, value: Any) -> UserSettings:
        return self.set_many({key: value})

    def set_many(self, updates: dict[str, Any]) -> UserSettings:
        """Apply several settings at once; nothing changes if any is invalid."""
        changes = {self._field_name(key): value for key, value in updates.items()}

        with self.store.mutate() as state:
            merged = {**state.settings.model_dump(), **changes}
            try:
                state.settings = UserSettings.model_validate(merged)
            except ValidationError as e:
                raise ValueError(f"Invalid settings: {e.errors()[0]['msg']}") from e

        self.log_debug("Settings updated", changes)
        return state.settings

    def reset(self) -> UserSettings:
        with self.store.mutate() as state:
            state.settings = UserSettings()
        self.log_debug("Settings reset to defaults")
        return state.settings

    @staticmethod
    def _field_name(key: str) -> str:
        fields = UserSettings.model_fields
        if key in fields:
            return key
        for name, field in fields.items():
            if field.alias == key:
                return name
        raise ValueError(f"Unknown setting '{key}'")
