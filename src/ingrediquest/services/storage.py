"""Key-value storage interface shared by the local stores."""

import json
import logging
from typing import Protocol

logger = logging.getLogger(__name__)

PREFERENCES_KEY = "userPreferences"
SAVED_RECIPES_KEY = "savedRecipes"
SHOPPING_LIST_KEY = "shoppingList"
MEAL_PLAN_KEY = "@meal_planner_data"
PLANNER_RECIPES_KEY = "@meal_planner_recipes"


class KeyValueStorage(Protocol):
    """Asynchronous string-keyed storage.

    Implementations absorb their own I/O failures: ``get`` returns ``None``
    and ``set``/``remove`` drop the write after logging it.
    """

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""

    async def set(self, key: str, value: str) -> None:
        """Store a value under a key."""

    async def remove(self, key: str) -> None:
        """Delete a key."""


async def read_json(storage: KeyValueStorage, key: str) -> object | None:
    """Return the decoded value for a key, or None if absent or malformed."""
    raw = await storage.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed JSON stored under %s", key)
        return None


async def write_json(storage: KeyValueStorage, key: str, payload: object) -> None:
    """Encode a payload and write it, logging instead of raising on failure."""
    try:
        await storage.set(key, encode_json(payload))
    except Exception:
        logger.exception("Error writing to storage: key=%s", key)


def encode_json(payload: object) -> str:
    """Encode JSON compactly, matching what the mobile client writes."""
    return json.dumps(payload, separators=(",", ":"))
