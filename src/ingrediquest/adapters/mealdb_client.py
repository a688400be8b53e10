"""TheMealDB API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class MealDbClient(Protocol):
    """Interface for TheMealDB lookups."""

    async def search(self, query: str) -> list[dict[str, object]]:
        """Search meals by name."""

    async def lookup(self, meal_id: int) -> dict[str, object] | None:
        """Return a meal by id, if it exists."""

    async def random(self) -> dict[str, object] | None:
        """Return a random meal."""

    async def categories(self) -> list[dict[str, object]]:
        """Return meal categories."""

    async def filter_by_category(self, category: str) -> list[dict[str, object]]:
        """Return meals in a category."""


@dataclass
class HttpxMealDbClient(MealDbClient):
    """HTTPX-backed TheMealDB client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxMealDbClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient())

    async def search(self, query: str) -> list[dict[str, object]]:
        """Search meals by name."""
        payload = await self._get("search.php", {"s": query})
        return payload.get("meals") or []

    async def lookup(self, meal_id: int) -> dict[str, object] | None:
        """Return a meal by id, if it exists."""
        payload = await self._get("lookup.php", {"i": meal_id})
        meals = payload.get("meals") or []
        return meals[0] if meals else None

    async def random(self) -> dict[str, object] | None:
        """Return a random meal."""
        payload = await self._get("random.php", {})
        meals = payload.get("meals") or []
        return meals[0] if meals else None

    async def categories(self) -> list[dict[str, object]]:
        """Return meal categories."""
        payload = await self._get("categories.php", {})
        return payload.get("categories") or []

    async def filter_by_category(self, category: str) -> list[dict[str, object]]:
        """Return meals in a category."""
        payload = await self._get("filter.php", {"c": category})
        return payload.get("meals") or []

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(self, path: str, params: dict[str, object]) -> dict[str, object]:
        response = await self.http_client.get(
            f"{self.base_url}/{path}", params=params, timeout=15
        )
        response.raise_for_status()
        return response.json()
