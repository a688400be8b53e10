"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request, status

from ingrediquest.api.models import (
    NewShoppingItem,
    NewShoppingList,
    PlannedMealBody,
    PlannerRecipeBody,
    PreferencesUpdate,
    RecipeSummaryBody,
    SessionTokens,
)
from ingrediquest.app_logging import configure_logging
from ingrediquest.containers import AppContainer, SessionRejected
from ingrediquest.domain.meal_plans import (
    PlannedMeal,
    PlannerRecipe,
    dump_meal_plan,
    dump_planner_recipe,
)
from ingrediquest.domain.preferences import dump_preferences
from ingrediquest.domain.recipes import RecipeSummary, dump_recipe_summary
from ingrediquest.domain.shopping import dump_shopping_list
from ingrediquest.services.recipe_search import RecipeSearchUnavailable

MAX_TRENDING = 20


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        await state_container.refresh_session()
        await state_container.load_all()
        try:
            state_container.follow_auth_events()
        except Exception:
            logger.exception("Failed to subscribe to auth events")
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/session")
    async def get_session(request: Request) -> dict[str, object]:
        """Return the signed-in user id, if any."""
        return {"userId": _container(request).session_context.user_id}

    @app.post("/session")
    async def sign_in(body: SessionTokens, request: Request) -> dict[str, object]:
        """Adopt a session issued by the client's sign-in."""
        state_container = _container(request)
        try:
            session = await state_container.sign_in(
                body.access_token, body.refresh_token
            )
        except SessionRejected as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
            ) from exc
        return {"userId": session.user_id}

    @app.delete("/session")
    async def sign_out(request: Request) -> dict[str, object]:
        """Sign out and fall back to device-local data."""
        state_container = _container(request)
        await state_container.sign_out()
        return {"userId": None}

    @app.get("/preferences")
    async def get_preferences(request: Request) -> dict[str, object]:
        """Return preferences and whether the user has configured them."""
        return _preferences_payload(_container(request))

    @app.patch("/preferences")
    async def update_preferences(
        update: PreferencesUpdate, request: Request
    ) -> dict[str, object]:
        """Merge the provided fields into the stored preferences."""
        state_container = _container(request)
        await state_container.preference_store.update(
            update.model_dump(exclude_unset=True)
        )
        return _preferences_payload(state_container)

    @app.post("/preferences/dark-mode")
    async def toggle_dark_mode(request: Request) -> dict[str, object]:
        """Flip dark mode."""
        state_container = _container(request)
        await state_container.preference_store.toggle_dark_mode()
        return _preferences_payload(state_container)

    @app.get("/saved-recipes")
    async def list_saved_recipes(request: Request) -> dict[str, object]:
        """Return saved recipe cards."""
        store = _container(request).saved_recipes_store
        return {"recipes": [dump_recipe_summary(r) for r in store.recipes]}

    @app.post("/saved-recipes", status_code=status.HTTP_201_CREATED)
    async def save_recipe(
        body: RecipeSummaryBody, request: Request
    ) -> dict[str, object]:
        """Bookmark a recipe card."""
        store = _container(request).saved_recipes_store
        await store.save(RecipeSummary(**body.model_dump()))
        return {"recipes": [dump_recipe_summary(r) for r in store.recipes]}

    @app.get("/saved-recipes/{recipe_id}")
    async def is_recipe_saved(recipe_id: int, request: Request) -> dict[str, object]:
        """Return whether a recipe is bookmarked."""
        store = _container(request).saved_recipes_store
        return {"id": recipe_id, "saved": store.is_saved(recipe_id)}

    @app.delete("/saved-recipes/{recipe_id}")
    async def remove_saved_recipe(
        recipe_id: int, request: Request
    ) -> dict[str, object]:
        """Remove a bookmarked recipe."""
        store = _container(request).saved_recipes_store
        await store.remove(recipe_id)
        return {"recipes": [dump_recipe_summary(r) for r in store.recipes]}

    @app.get("/shopping-lists")
    async def list_shopping_lists(request: Request) -> dict[str, object]:
        """Return every shopping list."""
        return _shopping_payload(_container(request))

    @app.post("/shopping-lists", status_code=status.HTTP_201_CREATED)
    async def create_shopping_list(
        body: NewShoppingList, request: Request
    ) -> dict[str, object]:
        """Create a shopping list; blank names are ignored and return id 0."""
        state_container = _container(request)
        recipe_id = await state_container.shopping_list_store.add_list(body.name)
        return {"recipeId": recipe_id, **_shopping_payload(state_container)}

    @app.delete("/shopping-lists/{recipe_id}")
    async def delete_shopping_list(
        recipe_id: int, request: Request
    ) -> dict[str, object]:
        """Delete a shopping list."""
        state_container = _container(request)
        await state_container.shopping_list_store.remove_list(recipe_id)
        return _shopping_payload(state_container)

    @app.post("/shopping-lists/{recipe_id}/items")
    async def add_shopping_item(
        recipe_id: int, body: NewShoppingItem, request: Request
    ) -> dict[str, object]:
        """Append an item to a list."""
        state_container = _container(request)
        await state_container.shopping_list_store.add_item_to_list(
            recipe_id, body.name, body.amount, body.unit
        )
        return _shopping_payload(state_container)

    @app.post("/shopping-lists/{recipe_id}/items/{item_id}/toggle")
    async def toggle_shopping_item(
        recipe_id: int, item_id: int, request: Request
    ) -> dict[str, object]:
        """Check or uncheck an item."""
        state_container = _container(request)
        await state_container.shopping_list_store.toggle_item(recipe_id, item_id)
        return _shopping_payload(state_container)

    @app.delete("/shopping-lists/{recipe_id}/items/{item_id}")
    async def delete_shopping_item(
        recipe_id: int, item_id: int, request: Request
    ) -> dict[str, object]:
        """Remove an item from a list."""
        state_container = _container(request)
        await state_container.shopping_list_store.remove_item(recipe_id, item_id)
        return _shopping_payload(state_container)

    @app.post("/shopping-lists/{recipe_id}/clear-checked")
    async def clear_checked_items(
        recipe_id: int, request: Request
    ) -> dict[str, object]:
        """Remove checked items from a list."""
        state_container = _container(request)
        await state_container.shopping_list_store.clear_checked_items(recipe_id)
        return _shopping_payload(state_container)

    @app.get("/meal-plan")
    async def get_meal_plan(request: Request) -> dict[str, object]:
        """Return the weekly plan and the recipe book."""
        return _meal_plan_payload(_container(request))

    @app.post("/meal-plan/{day_id}/meals", status_code=status.HTTP_201_CREATED)
    async def add_meal(
        day_id: str, body: PlannedMealBody, request: Request
    ) -> dict[str, object]:
        """Add a meal to a day."""
        state_container = _container(request)
        if not await state_container.meal_plan_store.add_meal(
            day_id, PlannedMeal(**body.model_dump())
        ):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _meal_plan_payload(state_container)

    @app.put("/meal-plan/{day_id}/meals/{index}")
    async def update_meal(
        day_id: str, index: int, body: PlannedMealBody, request: Request
    ) -> dict[str, object]:
        """Replace a meal slot."""
        state_container = _container(request)
        if not await state_container.meal_plan_store.update_meal(
            day_id, index, PlannedMeal(**body.model_dump())
        ):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _meal_plan_payload(state_container)

    @app.delete("/meal-plan/{day_id}/meals/{index}")
    async def delete_meal(
        day_id: str, index: int, request: Request
    ) -> dict[str, object]:
        """Remove a meal slot."""
        state_container = _container(request)
        if not await state_container.meal_plan_store.delete_meal(day_id, index):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _meal_plan_payload(state_container)

    @app.post("/meal-plan/recipes", status_code=status.HTTP_201_CREATED)
    async def add_planner_recipe(
        body: PlannerRecipeBody, request: Request
    ) -> dict[str, object]:
        """Add a recipe to the book, optionally linking it to a meal."""
        state_container = _container(request)
        attach_to = (
            (body.day_id, body.meal_index)
            if body.day_id is not None and body.meal_index is not None
            else None
        )
        recipe_id = await state_container.meal_plan_store.add_recipe(
            PlannerRecipe(
                id="",
                name=body.name,
                ingredients=body.ingredients,
                instructions=body.instructions,
                prep_time=body.prep_time,
                cook_time=body.cook_time,
            ),
            attach_to=attach_to,
        )
        if not recipe_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Recipe name is required",
            )
        return {"id": recipe_id, **_meal_plan_payload(state_container)}

    @app.get("/recipes/search")
    async def search_recipes(
        request: Request, ingredients: str = "", query: str = ""
    ) -> dict[str, object]:
        """Search by comma-separated ingredients, or by meal name."""
        service = _container(request).recipe_search_service
        if ingredients:
            try:
                results = await service.search_by_ingredients(ingredients.split(","))
            except RecipeSearchUnavailable as exc:
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
                ) from exc
        else:
            results = await service.search_meals(query)
        return {"results": [dump_recipe_summary(r) for r in results]}

    @app.get("/recipes/trending")
    async def trending_recipes(
        request: Request, count: int = Query(10, ge=1, le=MAX_TRENDING)
    ) -> dict[str, object]:
        """Return a selection of random meals."""
        service = _container(request).recipe_search_service
        results = await service.trending(count)
        return {"results": [dump_recipe_summary(r) for r in results]}

    @app.get("/recipes/categories")
    async def recipe_categories(request: Request) -> dict[str, object]:
        """Return meal category names."""
        service = _container(request).recipe_search_service
        return {"categories": await service.categories()}

    @app.get("/recipes/categories/{category}")
    async def browse_category(category: str, request: Request) -> dict[str, object]:
        """Return meals in a category."""
        service = _container(request).recipe_search_service
        results = await service.browse_category(category)
        return {"results": [dump_recipe_summary(r) for r in results]}

    @app.get("/recipes/{recipe_id}")
    async def recipe_details(recipe_id: int, request: Request) -> dict[str, object]:
        """Return full Spoonacular details for a recipe."""
        service = _container(request).recipe_search_service
        try:
            details = await service.get_recipe_details(recipe_id)
        except RecipeSearchUnavailable as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        if details is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return details

    @app.get("/meals/{meal_id}")
    async def meal_details(meal_id: int, request: Request) -> dict[str, object]:
        """Return the full TheMealDB record for a meal."""
        service = _container(request).recipe_search_service
        meal = await service.lookup_meal(meal_id)
        if meal is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return meal

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _preferences_payload(container: AppContainer) -> dict[str, object]:
    store = container.preference_store
    return {
        "preferences": dump_preferences(store.preferences),
        "isPreferencesSet": store.is_configured,
    }


def _shopping_payload(container: AppContainer) -> dict[str, object]:
    store = container.shopping_list_store
    return {"shoppingLists": [dump_shopping_list(item) for item in store.lists]}


def _meal_plan_payload(container: AppContainer) -> dict[str, object]:
    store = container.meal_plan_store
    return {
        "plan": dump_meal_plan(store.plan),
        "recipes": [dump_planner_recipe(recipe) for recipe in store.recipes],
    }
