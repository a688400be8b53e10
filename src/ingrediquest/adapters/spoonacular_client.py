"""Spoonacular recipe API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class SpoonacularClient(Protocol):
    """Interface for Spoonacular API interactions."""

    async def find_by_ingredients(
        self, ingredients: list[str], number: int = 10
    ) -> list[dict[str, object]]:
        """Return recipes that use the given ingredients."""

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        """Return full details for a recipe."""


@dataclass
class HttpxSpoonacularClient(SpoonacularClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxSpoonacularClient":
        """Create a client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def find_by_ingredients(
        self, ingredients: list[str], number: int = 10
    ) -> list[dict[str, object]]:
        """Search recipes by ingredients, maximizing used ingredients."""
        response = await self.http_client.get(
            f"{self.base_url}/recipes/findByIngredients",
            params={
                "apiKey": self.api_key,
                "ingredients": ",".join(ingredients),
                "number": number,
                "ranking": 2,
                "ignorePantry": "true",
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        """Fetch recipe details by id."""
        response = await self.http_client.get(
            f"{self.base_url}/recipes/{recipe_id}/information",
            params={"apiKey": self.api_key},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
