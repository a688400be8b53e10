"""Saved (bookmarked) recipes store."""

import logging
from dataclasses import dataclass, field

from ingrediquest.domain.recipes import (
    RecipeSummary,
    dump_recipe_summary,
    parse_recipe_summaries,
)
from ingrediquest.services.profile_mirror import (
    SAVED_RECIPES_FIELD,
    RemoteProfileMirror,
)
from ingrediquest.services.sessions import SessionContext
from ingrediquest.services.storage import (
    SAVED_RECIPES_KEY,
    KeyValueStorage,
    read_json,
    write_json,
)

logger = logging.getLogger(__name__)


@dataclass
class SavedRecipesStore:
    """Keeps the user's saved recipe cards.

    ``save`` does not de-duplicate: saving the same id twice stores two
    entries, and ``remove`` drops every entry with that id.
    """

    storage: KeyValueStorage
    mirror: RemoteProfileMirror
    session: SessionContext
    recipes: list[RecipeSummary] = field(default_factory=list)

    async def load(self) -> None:
        """Load from the remote profile when signed in, else local storage."""
        if self.session.user_id and await self.load_from_remote_mirror():
            return
        await self.load_from_local_storage()

    async def load_from_remote_mirror(self) -> bool:
        """Adopt the remote copy and back it up locally.

        Returns False when there is no usable remote copy.
        """
        raw = await self.mirror.fetch(SAVED_RECIPES_FIELD)
        if raw is None:
            return False
        try:
            recipes = parse_recipe_summaries(raw)
        except (KeyError, TypeError, ValueError):
            logger.exception("Error loading saved recipes from user metadata")
            return False
        self.recipes = recipes
        await write_json(self.storage, SAVED_RECIPES_KEY, self._payload())
        return True

    async def load_from_local_storage(self) -> None:
        """Load the locally stored list, falling back to an empty list."""
        raw = await read_json(self.storage, SAVED_RECIPES_KEY)
        if raw is None:
            self.recipes = []
            return
        try:
            self.recipes = parse_recipe_summaries(raw)
        except (KeyError, TypeError, ValueError):
            logger.exception("Error loading saved recipes from storage")
            self.recipes = []

    async def save(self, recipe: RecipeSummary) -> None:
        """Append a recipe and persist."""
        await self._commit([*self.recipes, recipe])
        logger.info("Recipe saved: %s", recipe.title)

    async def remove(self, recipe_id: int) -> None:
        """Remove every entry with the given id."""
        remaining = [recipe for recipe in self.recipes if recipe.id != recipe_id]
        if len(remaining) == len(self.recipes):
            return
        await self._commit(remaining)
        logger.info("Recipe removed: %s", recipe_id)

    def is_saved(self, recipe_id: int) -> bool:
        """Return True when at least one entry has the given id."""
        return any(recipe.id == recipe_id for recipe in self.recipes)

    async def _commit(self, recipes: list[RecipeSummary]) -> None:
        self.recipes = recipes
        payload = self._payload()
        await write_json(self.storage, SAVED_RECIPES_KEY, payload)
        if self.session.user_id:
            await self.mirror.push(SAVED_RECIPES_FIELD, payload)

    def _payload(self) -> list[dict[str, object]]:
        return [dump_recipe_summary(recipe) for recipe in self.recipes]
