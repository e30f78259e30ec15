from __future__ import annotations

from taskflow.domain.entities import UserPreferences
from taskflow.domain.enums import DefaultView, SortKey, Theme
from taskflow.domain.errors import ValidationError
from taskflow.infra.preferences import PreferencesStore

_CHOICES = {
    "default_view": DefaultView,
    "sort_order": SortKey,
    "theme": Theme,
}
_FLAGS = ("show_completed_tasks", "notifications_enabled")


class PreferencesService:
    def __init__(self, store: PreferencesStore) -> None:
        self._store = store

    def get(self) -> UserPreferences:
        return self._store.get()

    def update(self, data: dict) -> UserPreferences:
        normalized = dict(data)
        for key, enum in _CHOICES.items():
            if key in normalized:
                try:
                    normalized[key] = enum(normalized[key])
                except ValueError as exc:
                    raise ValidationError(f"Invalid {key}: {normalized[key]!r}", field=key) from exc
        if "reminder_offset" in normalized:
            offset = normalized["reminder_offset"]
            if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
                raise ValidationError("reminder_offset must be a non-negative number of minutes", field="reminder_offset")
        for key in _FLAGS:
            if key in normalized and not isinstance(normalized[key], bool):
                raise ValidationError(f"{key} must be true or false", field=key)
        return self._store.update(normalized)

    def reset(self) -> UserPreferences:
        return self._store.reset()
