"""Domain models for recipe search results and saved recipes."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RecipeSummary:
    """Lightweight recipe card as returned by ingredient search."""

    id: int
    title: str
    image: str
    used_ingredient_count: int | None = None
    missed_ingredient_count: int | None = None


def parse_recipe_summary(payload: dict[str, object]) -> RecipeSummary:
    """Parse a stored or API recipe payload into a domain model."""
    return RecipeSummary(
        id=int(payload["id"]),
        title=str(payload.get("title", "")),
        image=str(payload.get("image", "")),
        used_ingredient_count=_optional_int(payload.get("usedIngredientCount")),
        missed_ingredient_count=_optional_int(payload.get("missedIngredientCount")),
    )


def dump_recipe_summary(recipe: RecipeSummary) -> dict[str, object]:
    """Serialize a recipe summary to its JSON shape."""
    data: dict[str, object] = {
        "id": recipe.id,
        "title": recipe.title,
        "image": recipe.image,
    }
    if recipe.used_ingredient_count is not None:
        data["usedIngredientCount"] = recipe.used_ingredient_count
    if recipe.missed_ingredient_count is not None:
        data["missedIngredientCount"] = recipe.missed_ingredient_count
    return data


def parse_recipe_summaries(raw: object) -> list[RecipeSummary]:
    """Parse a JSON array of recipe summaries."""
    if not isinstance(raw, list):
        raise ValueError("Saved recipes payload must be a list")
    return [parse_recipe_summary(item) for item in raw]


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)
