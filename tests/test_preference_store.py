"""Tests for the preference store."""

import asyncio
import json

from ingrediquest.adapters.local_storage import BrowserLocalStorage
from ingrediquest.domain.preferences import DEFAULT_PROFILE_PICTURE
from ingrediquest.services.preferences import PreferenceStore
from ingrediquest.services.storage import PREFERENCES_KEY


def test_defaults_before_any_update() -> None:
    store = PreferenceStore(BrowserLocalStorage())

    asyncio.run(store.load())

    assert store.is_configured is False
    assert store.preferences.cooking_skill_level == "beginner"
    assert store.preferences.dietary_preferences == []
    assert store.preferences.cuisine_preferences == []
    assert store.preferences.allergies == []
    assert store.preferences.restrictions == []
    assert store.preferences.is_dark_mode is False
    assert store.preferences.profile_picture == DEFAULT_PROFILE_PICTURE


def test_update_merges_and_replaces_lists() -> None:
    storage = BrowserLocalStorage()
    store = PreferenceStore(storage)
    asyncio.run(store.update({"dietary_preferences": ["vegan"], "allergies": ["nuts"]}))

    asyncio.run(store.update({"dietary_preferences": ["keto"]}))

    assert store.is_configured is True
    assert store.preferences.dietary_preferences == ["keto"]
    assert store.preferences.allergies == ["nuts"]
    stored = json.loads(asyncio.run(storage.get(PREFERENCES_KEY)))
    assert stored["dietaryPreferences"] == ["keto"]
    assert stored["allergies"] == ["nuts"]
    assert stored["cookingSkillLevel"] == "beginner"


def test_update_stores_invalid_values_as_is() -> None:
    store = PreferenceStore(BrowserLocalStorage())

    asyncio.run(store.update({"cooking_skill_level": "wizard"}))

    assert store.preferences.cooking_skill_level == "wizard"


def test_update_ignores_unknown_fields() -> None:
    store = PreferenceStore(BrowserLocalStorage())

    asyncio.run(store.update({"favourite_color": "green", "display_name": "Sam"}))

    assert store.preferences.display_name == "Sam"
    assert not hasattr(store.preferences, "favourite_color")


def test_load_round_trips_stored_record() -> None:
    storage = BrowserLocalStorage()
    store = PreferenceStore(storage)
    asyncio.run(
        store.update(
            {
                "cuisine_preferences": ["thai", "mexican"],
                "cooking_skill_level": "advanced",
                "restrictions": ["halal"],
            }
        )
    )

    reloaded = PreferenceStore(storage)
    asyncio.run(reloaded.load())

    assert reloaded.is_configured is True
    assert reloaded.preferences == store.preferences


def test_load_keeps_defaults_for_corrupt_record() -> None:
    storage = BrowserLocalStorage()
    asyncio.run(storage.set(PREFERENCES_KEY, "[1, 2"))
    store = PreferenceStore(storage)

    asyncio.run(store.load())

    assert store.is_configured is False
    assert store.preferences.cooking_skill_level == "beginner"


def test_load_keeps_defaults_for_non_object_record() -> None:
    storage = BrowserLocalStorage()
    asyncio.run(storage.set(PREFERENCES_KEY, "[]"))
    store = PreferenceStore(storage)

    asyncio.run(store.load())

    assert store.is_configured is False


def test_toggle_dark_mode_persists_without_marking_configured() -> None:
    storage = BrowserLocalStorage()
    store = PreferenceStore(storage)

    asyncio.run(store.toggle_dark_mode())

    assert store.preferences.is_dark_mode is True
    assert store.is_configured is False
    assert json.loads(asyncio.run(storage.get(PREFERENCES_KEY)))["isDarkMode"] is True
