"""Persistent device storage backed by SQLite."""

import asyncio
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from ingrediquest.services.storage import KeyValueStorage

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS key_value (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""


@dataclass
class SqliteDeviceStorage(KeyValueStorage):
    """Device backend persisting values in a single SQLite table.

    Blocking SQLite calls run in a worker thread so callers can await them.
    """

    path: Path

    @classmethod
    def create(cls, path: str | Path) -> "SqliteDeviceStorage":
        """Create a storage instance for a database file path."""
        return cls(path=Path(path))

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""
        try:
            return await asyncio.to_thread(self._get, key)
        except (sqlite3.Error, OSError):
            logger.exception("Error reading from storage: key=%s", key)
            return None

    async def set(self, key: str, value: str) -> None:
        """Insert or replace a value."""
        try:
            await asyncio.to_thread(self._set, key, value)
        except (sqlite3.Error, OSError):
            logger.exception("Error writing to storage: key=%s", key)

    async def remove(self, key: str) -> None:
        """Delete a key if present."""
        try:
            await asyncio.to_thread(self._remove, key)
        except (sqlite3.Error, OSError):
            logger.exception("Error removing from storage: key=%s", key)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        try:
            conn.execute(_SCHEMA)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _get(self, key: str) -> str | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT value FROM key_value WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def _set(self, key: str, value: str) -> None:
        with self._connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO key_value (key, value) VALUES (?, ?)",
                (key, value),
            )

    def _remove(self, key: str) -> None:
        with self._connection() as conn:
            conn.execute("DELETE FROM key_value WHERE key = ?", (key,))
