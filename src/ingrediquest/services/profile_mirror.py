"""Best-effort replication of local collections into profile metadata."""

import json
import logging
from dataclasses import dataclass

from ingrediquest.services.sessions import IdentityProvider
from ingrediquest.services.storage import encode_json

logger = logging.getLogger(__name__)

SHOPPING_LISTS_FIELD = "shopping_lists"
SAVED_RECIPES_FIELD = "saved_recipes"


@dataclass
class RemoteProfileMirror:
    """Reads and overwrites whole collections stored in user metadata.

    Every push replaces the entire field, so the last writer wins when two
    devices mutate the same collection. There is no retry and no timeout.
    """

    identity: IdentityProvider

    async def fetch(self, field_name: str) -> object | None:
        """Return the decoded JSON stored under a metadata field."""
        try:
            metadata = await self.identity.get_user_metadata()
        except Exception:
            logger.exception("Error getting user data")
            return None
        raw = metadata.get(field_name) if metadata else None
        if not raw:
            return None
        if not isinstance(raw, str):
            return raw
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.exception("Malformed %s in user metadata", field_name)
            return None

    async def push(self, field_name: str, payload: object) -> bool:
        """Overwrite a metadata field with the JSON-encoded payload."""
        try:
            await self.identity.update_user_metadata(
                {field_name: encode_json(payload)}
            )
        except Exception:
            logger.exception("Error updating user metadata: field=%s", field_name)
            return False
        logger.debug("Updated user metadata field %s", field_name)
        return True
