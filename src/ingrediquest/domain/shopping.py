"""Domain models for shopping lists."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShoppingItem:
    """A single ingredient line on a shopping list."""

    id: int
    original_name: str
    amount: float
    unit: str
    checked: bool = False


@dataclass(frozen=True)
class ShoppingList:
    """A named shopping list; ``recipe_id`` doubles as the list id."""

    recipe_id: int
    recipe_name: str
    ingredients: list[ShoppingItem] = field(default_factory=list)


def parse_shopping_item(payload: dict[str, object]) -> ShoppingItem:
    """Parse a stored shopping item."""
    return ShoppingItem(
        id=int(payload["id"]),
        original_name=str(payload.get("originalName", "")),
        amount=_number(payload.get("amount", 1)),
        unit=str(payload.get("unit", "")),
        checked=bool(payload.get("checked", False)),
    )


def parse_shopping_list(payload: dict[str, object]) -> ShoppingList:
    """Parse a stored shopping list with its items."""
    ingredients = payload.get("ingredients") or []
    if not isinstance(ingredients, list):
        raise ValueError("Shopping list ingredients must be a list")
    return ShoppingList(
        recipe_id=int(payload["recipeId"]),
        recipe_name=str(payload.get("recipeName", "")),
        ingredients=[parse_shopping_item(item) for item in ingredients],
    )


def parse_shopping_lists(raw: object) -> list[ShoppingList]:
    """Parse a JSON array of shopping lists."""
    if not isinstance(raw, list):
        raise ValueError("Shopping lists payload must be a list")
    return [parse_shopping_list(item) for item in raw]


def dump_shopping_list(shopping_list: ShoppingList) -> dict[str, object]:
    """Serialize a shopping list to its JSON shape."""
    return {
        "recipeId": shopping_list.recipe_id,
        "recipeName": shopping_list.recipe_name,
        "ingredients": [
            {
                "id": item.id,
                "originalName": item.original_name,
                "amount": item.amount,
                "unit": item.unit,
                "checked": item.checked,
            }
            for item in shopping_list.ingredients
        ],
    }


def _number(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"Invalid amount: {value!r}")
    return value
