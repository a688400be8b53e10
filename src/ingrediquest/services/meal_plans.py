"""Weekly meal plan and personal recipe book."""

import logging
from dataclasses import dataclass, field, replace

from ingrediquest.domain.meal_plans import (
    MealPlanDay,
    PlannedMeal,
    PlannerRecipe,
    default_weekly_plan,
    dump_meal_plan,
    dump_planner_recipe,
    parse_meal_plan,
    parse_planner_recipes,
)
from ingrediquest.services.clock import (
    Clock,
    current_timestamp_ms,
    unique_timestamp_id,
)
from ingrediquest.services.storage import (
    MEAL_PLAN_KEY,
    PLANNER_RECIPES_KEY,
    KeyValueStorage,
    read_json,
    write_json,
)

logger = logging.getLogger(__name__)


@dataclass
class MealPlanStore:
    """Keeps the weekly plan and the recipes meals can link to."""

    storage: KeyValueStorage
    clock: Clock = current_timestamp_ms
    plan: list[MealPlanDay] = field(default_factory=default_weekly_plan)
    recipes: list[PlannerRecipe] = field(default_factory=list)

    async def load(self) -> None:
        """Load both collections, using defaults for anything unusable."""
        raw_plan = await read_json(self.storage, MEAL_PLAN_KEY)
        try:
            self.plan = (
                parse_meal_plan(raw_plan)
                if raw_plan is not None
                else default_weekly_plan()
            )
        except (KeyError, TypeError, ValueError):
            logger.exception("Error loading meal plan")
            self.plan = default_weekly_plan()

        raw_recipes = await read_json(self.storage, PLANNER_RECIPES_KEY)
        try:
            self.recipes = (
                parse_planner_recipes(raw_recipes) if raw_recipes is not None else []
            )
        except (KeyError, TypeError, ValueError):
            logger.exception("Error loading planner recipes")
            self.recipes = []

    async def reset(self) -> None:
        """Restore the starter plan and forget stored data."""
        self.plan = default_weekly_plan()
        self.recipes = []
        await self.storage.remove(MEAL_PLAN_KEY)
        await self.storage.remove(PLANNER_RECIPES_KEY)

    def get_day(self, day_id: str) -> MealPlanDay | None:
        """Return a day of the plan by id."""
        return next((day for day in self.plan if day.id == day_id), None)

    def get_recipe(self, recipe_id: str) -> PlannerRecipe | None:
        """Return a recipe from the book by id."""
        return next((r for r in self.recipes if r.id == recipe_id), None)

    async def add_meal(self, day_id: str, meal: PlannedMeal) -> bool:
        """Append a meal to a day."""
        day = self.get_day(day_id)
        if day is None:
            logger.warning("Meal plan day %s not found", day_id)
            return False
        await self._commit_plan(day_id, [*day.meals, meal])
        return True

    async def update_meal(self, day_id: str, index: int, meal: PlannedMeal) -> bool:
        """Replace the meal at a position within a day."""
        day = self.get_day(day_id)
        if day is None or not 0 <= index < len(day.meals):
            logger.warning("Meal %s/%s not found", day_id, index)
            return False
        meals = list(day.meals)
        meals[index] = meal
        await self._commit_plan(day_id, meals)
        return True

    async def delete_meal(self, day_id: str, index: int) -> bool:
        """Remove the meal at a position within a day."""
        day = self.get_day(day_id)
        if day is None or not 0 <= index < len(day.meals):
            logger.warning("Meal %s/%s not found", day_id, index)
            return False
        meals = [meal for position, meal in enumerate(day.meals) if position != index]
        await self._commit_plan(day_id, meals)
        return True

    async def add_recipe(
        self,
        recipe: PlannerRecipe,
        attach_to: tuple[str, int] | None = None,
    ) -> str:
        """Add a recipe to the book and optionally link it to a meal.

        The recipe's id is replaced by a timestamp. Returns ``""`` when the
        name is blank.
        """
        name = recipe.name.strip()
        if not name:
            return ""
        taken = (int(item.id) for item in self.recipes if item.id.isdigit())
        stored = replace(
            recipe, id=str(unique_timestamp_id(self.clock, taken)), name=name
        )
        self.recipes = [*self.recipes, stored]
        await write_json(
            self.storage,
            PLANNER_RECIPES_KEY,
            [dump_planner_recipe(item) for item in self.recipes],
        )
        if attach_to is not None:
            day_id, index = attach_to
            day = self.get_day(day_id)
            if day is not None and 0 <= index < len(day.meals):
                await self.update_meal(
                    day_id, index, replace(day.meals[index], recipe_id=stored.id)
                )
            else:
                logger.warning("Cannot attach recipe to meal %s/%s", day_id, index)
        return stored.id

    async def _commit_plan(self, day_id: str, meals: list[PlannedMeal]) -> None:
        self.plan = [
            replace(day, meals=meals) if day.id == day_id else day for day in self.plan
        ]
        await write_json(self.storage, MEAL_PLAN_KEY, dump_meal_plan(self.plan))
