"""Pydantic request bodies for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase keys as sent by the mobile client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PreferencesUpdate(CamelModel):
    """Partial preference update; omitted fields are left unchanged."""

    dietary_preferences: list[str] | None = None
    cuisine_preferences: list[str] | None = None
    cooking_skill_level: str | None = None
    allergies: list[str] | None = None
    restrictions: list[str] | None = None
    is_dark_mode: bool | None = None
    profile_picture: str | None = None
    display_name: str | None = None


class RecipeSummaryBody(CamelModel):
    """Recipe card to bookmark."""

    id: int
    title: str
    image: str
    used_ingredient_count: int | None = None
    missed_ingredient_count: int | None = None


class NewShoppingList(CamelModel):
    """Name for a new shopping list."""

    name: str


class NewShoppingItem(CamelModel):
    """Item to append to a shopping list."""

    name: str
    amount: float | None = None
    unit: str | None = None


class PlannedMealBody(CamelModel):
    """Meal slot payload."""

    meal_type: str = Field(alias="type")
    title: str
    time: str
    recipe_id: str | None = None


class PlannerRecipeBody(CamelModel):
    """Recipe book entry, optionally linked to a meal slot."""

    name: str
    ingredients: list[str] = Field(default_factory=list)
    instructions: str = ""
    prep_time: str = ""
    cook_time: str = ""
    day_id: str | None = None
    meal_index: int | None = None


class SessionTokens(CamelModel):
    """Tokens from a sign-in performed by the client."""

    access_token: str
    refresh_token: str
