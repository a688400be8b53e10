"""Browser-style local storage kept in process memory."""

import logging
from dataclasses import dataclass, field

from ingrediquest.services.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class QuotaExceededError(Exception):
    """Raised when a write would exceed the configured storage quota."""


@dataclass
class BrowserLocalStorage(KeyValueStorage):
    """Web-context backend with ``localStorage`` semantics.

    Values live for the lifetime of the process. ``quota_chars`` caps the
    combined size of keys and values the way browsers cap ``localStorage``.
    """

    quota_chars: int | None = None
    _items: dict[str, str] = field(default_factory=dict)

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""
        return self._items.get(key)

    async def set(self, key: str, value: str) -> None:
        """Store a value, dropping it when the quota would be exceeded."""
        try:
            self._check_quota(key, value)
        except QuotaExceededError:
            logger.exception("Error writing to storage: key=%s", key)
            return
        self._items[key] = value

    async def remove(self, key: str) -> None:
        """Delete a key."""
        self._items.pop(key, None)

    def _check_quota(self, key: str, value: str) -> None:
        if self.quota_chars is None:
            return
        used = sum(
            len(name) + len(stored)
            for name, stored in self._items.items()
            if name != key
        )
        if used + len(key) + len(value) > self.quota_chars:
            raise QuotaExceededError(
                f"Storage quota of {self.quota_chars} characters exceeded"
            )
