"""Device-local user preference store."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from ingrediquest.domain.preferences import (
    PREFERENCE_FIELDS,
    UserPreferences,
    dump_preferences,
    parse_preferences,
)
from ingrediquest.services.storage import (
    PREFERENCES_KEY,
    KeyValueStorage,
    read_json,
    write_json,
)

logger = logging.getLogger(__name__)


@dataclass
class PreferenceStore:
    """Holds the preference record and persists every change."""

    storage: KeyValueStorage
    preferences: UserPreferences = field(default_factory=UserPreferences)
    is_configured: bool = False

    async def load(self) -> None:
        """Read stored preferences, keeping defaults when absent or corrupt."""
        raw = await read_json(self.storage, PREFERENCES_KEY)
        if raw is None:
            return
        try:
            self.preferences = parse_preferences(raw)
        except (TypeError, ValueError):
            logger.exception("Error loading preferences")
            return
        self.is_configured = True

    async def update(self, partial: Mapping[str, object]) -> None:
        """Shallow-merge named fields into the record and persist it.

        Lists are replaced wholesale. Unknown field names are ignored.
        """
        unknown = set(partial) - PREFERENCE_FIELDS
        if unknown:
            logger.warning("Ignoring unknown preference fields: %s", sorted(unknown))
        changes = {key: value for key, value in partial.items() if key not in unknown}
        self.preferences = replace(self.preferences, **changes)
        self.is_configured = True
        await self._persist()

    async def toggle_dark_mode(self) -> None:
        """Flip the dark mode flag and persist the record."""
        self.preferences = replace(
            self.preferences, is_dark_mode=not self.preferences.is_dark_mode
        )
        await self._persist()

    async def _persist(self) -> None:
        await write_json(
            self.storage, PREFERENCES_KEY, dump_preferences(self.preferences)
        )
