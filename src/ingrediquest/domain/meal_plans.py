"""Domain models for the weekly meal planner."""

from dataclasses import dataclass, field

MEAL_TYPES = ("breakfast", "lunch", "dinner")


@dataclass(frozen=True)
class PlannedMeal:
    """A meal slot on a given day."""

    meal_type: str
    title: str
    time: str
    recipe_id: str | None = None


@dataclass(frozen=True)
class MealPlanDay:
    """One day of the weekly plan."""

    id: str
    day: str
    meals: list[PlannedMeal] = field(default_factory=list)


@dataclass(frozen=True)
class PlannerRecipe:
    """A user-authored recipe that meals can link to."""

    id: str
    name: str
    ingredients: list[str] = field(default_factory=list)
    instructions: str = ""
    prep_time: str = ""
    cook_time: str = ""


_DEFAULT_MENU = (
    ("Monday", "Oatmeal with Berries", "Chicken Caesar Salad", "Grilled Salmon"),
    ("Tuesday", "Smoothie Bowl", "Quinoa Buddha Bowl", "Vegetable Stir-Fry"),
    ("Wednesday", "Avocado Toast", "Lentil Soup", "Baked Chicken"),
    ("Thursday", "Protein Pancakes", "Mediterranean Salad", "Pasta Primavera"),
    ("Friday", "Yogurt Parfait", "Turkey Wrap", "Grilled Vegetables"),
    ("Saturday", "Eggs Benedict", "Caprese Sandwich", "Steak & Potatoes"),
    ("Sunday", "French Toast", "Cobb Salad", "Roast Chicken"),
)

_WEEKDAY_TIMES = ("8:00 AM", "12:30 PM", "7:00 PM")
_WEEKEND_TIMES = {
    "Saturday": ("9:00 AM", "1:00 PM", "7:30 PM"),
    "Sunday": ("9:00 AM", "1:00 PM", "7:00 PM"),
}


def default_weekly_plan() -> list[MealPlanDay]:
    """Return the starter plan shown before the user edits anything."""
    plan = []
    for index, (day, *titles) in enumerate(_DEFAULT_MENU, start=1):
        times = _WEEKEND_TIMES.get(day, _WEEKDAY_TIMES)
        meals = [
            PlannedMeal(meal_type=meal_type, title=title, time=time)
            for meal_type, title, time in zip(MEAL_TYPES, titles, times, strict=True)
        ]
        plan.append(MealPlanDay(id=str(index), day=day, meals=meals))
    return plan


def parse_meal_plan(raw: object) -> list[MealPlanDay]:
    """Parse a stored weekly plan."""
    if not isinstance(raw, list):
        raise ValueError("Meal plan payload must be a list")
    return [
        MealPlanDay(
            id=str(day["id"]),
            day=str(day["day"]),
            meals=[_parse_meal(meal) for meal in day.get("meals", [])],
        )
        for day in raw
    ]


def dump_meal_plan(plan: list[MealPlanDay]) -> list[dict[str, object]]:
    """Serialize a weekly plan."""
    return [
        {"id": day.id, "day": day.day, "meals": [dump_meal(m) for m in day.meals]}
        for day in plan
    ]


def dump_meal(meal: PlannedMeal) -> dict[str, object]:
    data: dict[str, object] = {
        "type": meal.meal_type,
        "title": meal.title,
        "time": meal.time,
    }
    if meal.recipe_id is not None:
        data["recipeId"] = meal.recipe_id
    return data


def parse_planner_recipes(raw: object) -> list[PlannerRecipe]:
    """Parse the stored recipe book."""
    if not isinstance(raw, list):
        raise ValueError("Planner recipes payload must be a list")
    return [
        PlannerRecipe(
            id=str(item["id"]),
            name=str(item.get("name", "")),
            ingredients=[str(value) for value in item.get("ingredients", [])],
            instructions=str(item.get("instructions", "")),
            prep_time=str(item.get("prepTime", "")),
            cook_time=str(item.get("cookTime", "")),
        )
        for item in raw
    ]


def dump_planner_recipe(recipe: PlannerRecipe) -> dict[str, object]:
    return {
        "id": recipe.id,
        "name": recipe.name,
        "ingredients": list(recipe.ingredients),
        "instructions": recipe.instructions,
        "prepTime": recipe.prep_time,
        "cookTime": recipe.cook_time,
    }


def _parse_meal(payload: dict[str, object]) -> PlannedMeal:
    recipe_id = payload.get("recipeId")
    return PlannedMeal(
        meal_type=str(payload["type"]),
        title=str(payload.get("title", "")),
        time=str(payload.get("time", "")),
        recipe_id=str(recipe_id) if recipe_id is not None else None,
    )
