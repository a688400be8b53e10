"""Shopping list store with remote profile mirroring."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from ingrediquest.domain.shopping import (
    ShoppingItem,
    ShoppingList,
    dump_shopping_list,
    parse_shopping_lists,
)
from ingrediquest.services.clock import (
    Clock,
    current_timestamp_ms,
    unique_timestamp_id,
)
from ingrediquest.services.profile_mirror import (
    SHOPPING_LISTS_FIELD,
    RemoteProfileMirror,
)
from ingrediquest.services.sessions import SessionContext
from ingrediquest.services.storage import (
    SHOPPING_LIST_KEY,
    KeyValueStorage,
    read_json,
    write_json,
)

logger = logging.getLogger(__name__)

NOT_CREATED = 0


@dataclass
class ShoppingListStore:
    """Named ingredient lists kept in memory, on disk and in the profile.

    Every mutation computes the next collection from the current snapshot,
    replaces the in-memory state, writes local storage and then, when a
    user is signed in, overwrites the remote ``shopping_lists`` field with
    the full collection. Operations are not serialized against each other,
    and the remote copy follows last-writer-wins.
    """

    storage: KeyValueStorage
    mirror: RemoteProfileMirror
    session: SessionContext
    clock: Clock = current_timestamp_ms
    lists: list[ShoppingList] = field(default_factory=list)
    is_loading: bool = False

    async def load(self) -> None:
        """Load lists, preferring the remote profile when signed in."""
        self.is_loading = True
        try:
            if self.session.user_id and await self.load_from_remote_mirror():
                return
            await self.load_from_local_storage()
        finally:
            self.is_loading = False

    async def load_from_remote_mirror(self) -> bool:
        """Adopt the remote copy and refresh the local backup.

        Returns False when the profile holds no usable lists.
        """
        raw = await self.mirror.fetch(SHOPPING_LISTS_FIELD)
        if raw is None:
            return False
        try:
            lists = parse_shopping_lists(raw)
        except (KeyError, TypeError, ValueError):
            logger.exception("Error loading shopping lists from user metadata")
            return False
        self.lists = lists
        await write_json(self.storage, SHOPPING_LIST_KEY, self._payload())
        return True

    async def load_from_local_storage(self) -> None:
        """Load the locally stored lists, falling back to none."""
        raw = await read_json(self.storage, SHOPPING_LIST_KEY)
        if raw is None:
            self.lists = []
            return
        try:
            self.lists = parse_shopping_lists(raw)
        except (KeyError, TypeError, ValueError):
            logger.exception("Error loading shopping lists from storage")
            self.lists = []

    def get_list(self, recipe_id: int) -> ShoppingList | None:
        """Return a list by id, if present."""
        for shopping_list in self.lists:
            if shopping_list.recipe_id == recipe_id:
                return shopping_list
        return None

    async def add_list(self, name: str) -> int:
        """Create an empty list and return its id, or 0 for a blank name."""
        cleaned = name.strip()
        if not cleaned:
            return NOT_CREATED
        current = self.lists
        new_list = ShoppingList(
            recipe_id=unique_timestamp_id(
                self.clock, (item.recipe_id for item in current)
            ),
            recipe_name=cleaned,
        )
        logger.info("Adding shopping list %s", new_list.recipe_id)
        await self._commit([*current, new_list])
        return new_list.recipe_id

    async def add_item_to_list(
        self,
        recipe_id: int,
        name: str,
        amount: float | None = None,
        unit: str | None = None,
    ) -> ShoppingItem | None:
        """Append an item to a list; returns None when nothing was added."""
        cleaned = name.strip()
        if not cleaned:
            return None
        current = self.lists
        target = self.get_list(recipe_id)
        if target is None:
            logger.warning("Shopping list %s not found", recipe_id)
            return None
        item = ShoppingItem(
            id=unique_timestamp_id(self.clock, (i.id for i in target.ingredients)),
            original_name=cleaned,
            amount=amount or 1,
            unit=unit or "",
            checked=False,
        )
        await self._commit(
            _map_list(
                current,
                recipe_id,
                lambda ingredients: [*ingredients, item],
            )
        )
        return item

    async def toggle_item(self, recipe_id: int, item_id: int) -> None:
        """Flip the checked flag of one item."""
        if not self._has_item(recipe_id, item_id):
            return
        await self._commit(
            _map_list(
                self.lists,
                recipe_id,
                lambda ingredients: [
                    _toggled(item) if item.id == item_id else item
                    for item in ingredients
                ],
            )
        )

    async def remove_item(self, recipe_id: int, item_id: int) -> None:
        """Remove one item from a list."""
        if not self._has_item(recipe_id, item_id):
            return
        await self._commit(
            _map_list(
                self.lists,
                recipe_id,
                lambda ingredients: [i for i in ingredients if i.id != item_id],
            )
        )

    async def remove_list(self, recipe_id: int) -> None:
        """Delete a whole list."""
        if self.get_list(recipe_id) is None:
            return
        await self._commit(
            [item for item in self.lists if item.recipe_id != recipe_id]
        )

    async def clear_checked_items(self, recipe_id: int) -> None:
        """Drop every checked item from a list."""
        if self.get_list(recipe_id) is None:
            return
        await self._commit(
            _map_list(
                self.lists,
                recipe_id,
                lambda ingredients: [i for i in ingredients if not i.checked],
            )
        )

    def _has_item(self, recipe_id: int, item_id: int) -> bool:
        target = self.get_list(recipe_id)
        return target is not None and any(
            item.id == item_id for item in target.ingredients
        )

    async def _commit(self, lists: list[ShoppingList]) -> None:
        self.lists = lists
        payload = self._payload()
        await write_json(self.storage, SHOPPING_LIST_KEY, payload)
        if self.session.user_id:
            await self.mirror.push(SHOPPING_LISTS_FIELD, payload)
        else:
            logger.debug("Not signed in, skipping shopping list mirror")

    def _payload(self) -> list[dict[str, object]]:
        return [dump_shopping_list(item) for item in self.lists]


def _map_list(
    lists: list[ShoppingList],
    recipe_id: int,
    update: Callable[[list[ShoppingItem]], list[ShoppingItem]],
) -> list[ShoppingList]:
    """Return a copy of ``lists`` with one list's ingredients rewritten."""
    return [
        replace(item, ingredients=update(item.ingredients))
        if item.recipe_id == recipe_id
        else item
        for item in lists
    ]


def _toggled(item: ShoppingItem) -> ShoppingItem:
    return replace(item, checked=not item.checked)
