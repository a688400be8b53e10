"""Tests for container wiring."""

import asyncio
import json
from pathlib import Path

import pytest

from ingrediquest.adapters.local_storage import BrowserLocalStorage
from ingrediquest.adapters.sqlite_storage import SqliteDeviceStorage
from ingrediquest.config import Settings
from ingrediquest.containers import (
    AppContainer,
    SessionRejected,
    build_container,
    create_storage,
)
from ingrediquest.domain.meal_plans import PlannedMeal
from ingrediquest.domain.sessions import AuthSession
from ingrediquest.services.storage import MEAL_PLAN_KEY
from tests.conftest import TEST_ANON_KEY, FakeIdentityProvider


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.storage, BrowserLocalStorage)
    assert container.recipe_search_service.spoonacular is None
    asyncio.run(container.close_resources())


def test_create_storage_selects_device_backend(tmp_path: Path) -> None:
    settings = Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key=TEST_ANON_KEY,
        platform="ios",
        storage_path=str(tmp_path / "app.sqlite3"),
    )

    storage = create_storage(settings)

    assert isinstance(storage, SqliteDeviceStorage)
    assert storage.path == tmp_path / "app.sqlite3"


def test_sign_in_reloads_collections_from_profile(
    container: AppContainer, identity: FakeIdentityProvider
) -> None:
    identity.metadata["shopping_lists"] = json.dumps(
        [{"recipeId": 3, "recipeName": "Remote", "ingredients": []}]
    )
    identity.metadata["saved_recipes"] = json.dumps(
        [{"id": 52772, "title": "Casserole", "image": ""}]
    )

    asyncio.run(container.handle_session_change(AuthSession(user_id="user-1")))

    assert container.session_context.user_id == "user-1"
    assert [item.recipe_name for item in container.shopping_list_store.lists] == [
        "Remote"
    ]
    assert container.saved_recipes_store.is_saved(52772)


def test_same_user_does_not_reload(container: AppContainer) -> None:
    asyncio.run(container.handle_session_change(AuthSession(user_id="user-1")))
    asyncio.run(container.shopping_list_store.add_list("Kept"))
    container.shopping_list_store.lists = []

    asyncio.run(
        container.handle_session_change(
            AuthSession(user_id="user-1", access_token="refreshed")
        )
    )

    assert container.shopping_list_store.lists == []


def test_sign_out_resets_meal_plan(container: AppContainer) -> None:
    store = container.meal_plan_store
    asyncio.run(container.handle_session_change(AuthSession(user_id="user-1")))
    asyncio.run(
        store.add_meal("1", PlannedMeal(meal_type="snack", title="Nuts", time="4 PM"))
    )

    asyncio.run(container.handle_session_change(None))

    assert len(store.get_day("1").meals) == 3


def test_follow_auth_events_schedules_reload(
    container: AppContainer, identity: FakeIdentityProvider
) -> None:
    async def scenario() -> None:
        container.follow_auth_events()
        identity.listeners[0](AuthSession(user_id="user-2"))
        await asyncio.gather(*container._pending)

    asyncio.run(scenario())

    assert container.session_context.user_id == "user-2"


def test_load_all_keeps_starter_week_when_signed_out(
    container: AppContainer, storage: BrowserLocalStorage
) -> None:
    asyncio.run(storage.set(MEAL_PLAN_KEY, json.dumps([])))

    asyncio.run(container.load_all())

    assert len(container.meal_plan_store.plan) == 7


def test_load_all_reads_meal_plan_when_signed_in(
    container: AppContainer, storage: BrowserLocalStorage
) -> None:
    asyncio.run(storage.set(MEAL_PLAN_KEY, json.dumps([])))
    container.session_context.set_session(AuthSession(user_id="user-1"))

    asyncio.run(container.load_all())

    assert container.meal_plan_store.plan == []


def test_sign_in_rejects_unknown_tokens(container: AppContainer) -> None:
    with pytest.raises(SessionRejected):
        asyncio.run(container.sign_in("forged", "refresh"))

    assert container.session_context.user_id is None


def test_sign_in_and_out_round_trip(
    container: AppContainer, identity: FakeIdentityProvider
) -> None:
    session = asyncio.run(container.sign_in("access-1", "refresh-1"))

    assert session.user_id == "user-1"
    assert container.session_context.user_id == "user-1"

    asyncio.run(container.sign_out())

    assert container.session_context.user_id is None
    assert identity.session is None
