"""Recipe discovery over the third-party recipe APIs."""

import asyncio
import logging
from dataclasses import dataclass

import httpx

from ingrediquest.adapters.mealdb_client import MealDbClient
from ingrediquest.adapters.spoonacular_client import SpoonacularClient
from ingrediquest.domain.recipes import RecipeSummary, parse_recipe_summary
from ingrediquest.services.cache import Cache

logger = logging.getLogger(__name__)

# Transport failures, non-JSON bodies and payloads missing expected keys.
UPSTREAM_ERRORS = (httpx.HTTPError, KeyError, TypeError, ValueError)


class RecipeSearchUnavailable(Exception):
    """Raised when ingredient search is requested without an API key."""


@dataclass
class RecipeSearchService:
    """Search recipes by ingredient or name and map them to recipe cards."""

    mealdb: MealDbClient
    cache: Cache
    spoonacular: SpoonacularClient | None = None
    ttl_seconds: int = 3600

    async def search_by_ingredients(
        self, ingredients: list[str], number: int = 10
    ) -> list[RecipeSummary]:
        """Return recipes that use the given ingredients, cached by query."""
        cleaned = normalize_ingredients(ingredients)
        if not cleaned:
            return []
        if self.spoonacular is None:
            raise RecipeSearchUnavailable("Spoonacular API key is not configured")
        cache_key = f"ingredients:{number}:{','.join(cleaned)}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached
        try:
            payload = await self.spoonacular.find_by_ingredients(cleaned, number)
            results = [parse_recipe_summary(item) for item in payload]
        except UPSTREAM_ERRORS:
            logger.exception("Ingredient search failed")
            return []
        self.cache.set(cache_key, results, self.ttl_seconds)
        return results

    async def get_recipe_details(self, recipe_id: int) -> dict[str, object] | None:
        """Return full Spoonacular details for a recipe."""
        if self.spoonacular is None:
            raise RecipeSearchUnavailable("Spoonacular API key is not configured")
        try:
            return await self.spoonacular.get_recipe_information(recipe_id)
        except UPSTREAM_ERRORS:
            logger.exception("Recipe lookup failed: id=%s", recipe_id)
            return None

    async def search_meals(self, query: str) -> list[RecipeSummary]:
        """Search TheMealDB by meal name."""
        if not query.strip():
            return []
        try:
            meals = await self.mealdb.search(query.strip())
            return [meal_to_summary(meal) for meal in meals]
        except UPSTREAM_ERRORS:
            logger.exception("Meal search failed")
            return []

    async def lookup_meal(self, meal_id: int) -> dict[str, object] | None:
        """Return the full TheMealDB record for a meal."""
        try:
            return await self.mealdb.lookup(meal_id)
        except UPSTREAM_ERRORS:
            logger.exception("Meal lookup failed: id=%s", meal_id)
            return None

    async def categories(self) -> list[str]:
        """Return the names of TheMealDB categories."""
        try:
            categories = await self.mealdb.categories()
            return [str(item["strCategory"]) for item in categories]
        except UPSTREAM_ERRORS:
            logger.exception("Category listing failed")
            return []

    async def browse_category(self, category: str) -> list[RecipeSummary]:
        """Return meals in a category."""
        try:
            meals = await self.mealdb.filter_by_category(category)
            return [meal_to_summary(meal) for meal in meals]
        except UPSTREAM_ERRORS:
            logger.exception("Category browse failed: %s", category)
            return []

    async def trending(self, count: int = 10) -> list[RecipeSummary]:
        """Return up to ``count`` distinct random meals."""
        results = await asyncio.gather(
            *(self.mealdb.random() for _ in range(count)), return_exceptions=True
        )
        trending: dict[int, RecipeSummary] = {}
        for result in results:
            if isinstance(result, BaseException):
                logger.warning("Random meal request failed: %s", result)
                continue
            if not result:
                continue
            try:
                summary = meal_to_summary(result)
            except UPSTREAM_ERRORS:
                logger.exception("Malformed random meal")
                continue
            trending.setdefault(summary.id, summary)
        return list(trending.values())


def normalize_ingredients(ingredients: list[str]) -> list[str]:
    """Lowercase, trim, de-duplicate and sort ingredient names."""
    return sorted({item.strip().lower() for item in ingredients if item.strip()})


def meal_to_summary(meal: dict[str, object]) -> RecipeSummary:
    """Map a TheMealDB record to a recipe card."""
    return RecipeSummary(
        id=int(meal["idMeal"]),
        title=str(meal.get("strMeal", "")),
        image=str(meal.get("strMealThumb", "")),
    )
