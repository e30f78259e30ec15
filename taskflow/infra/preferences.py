from __future__ import annotations

import logging
import threading
from dataclasses import fields, replace

from taskflow.domain.entities import UserPreferences
from taskflow.domain.errors import ValidationError

logger = logging.getLogger(__name__)

PREFERENCE_FIELDS = frozenset(field.name for field in fields(UserPreferences))


class PreferencesStore:
    """Single preferences record; ``reset`` restores the defaults it was built with."""

    def __init__(self, defaults: UserPreferences | None = None) -> None:
        self._defaults = defaults or UserPreferences()
        self._current = self._defaults
        self._lock = threading.Lock()

    def get(self) -> UserPreferences:
        return self._current

    def update(self, data: dict) -> UserPreferences:
        unknown = set(data) - PREFERENCE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown preferences: {', '.join(sorted(unknown))}")
        with self._lock:
            self._current = replace(self._current, **data)
            logger.info("Updated preferences %s", sorted(data))
            return self._current

    def reset(self) -> UserPreferences:
        with self._lock:
            self._current = self._defaults
        logger.info("Preferences reset to defaults")
        return self._current
