"""Shared test fixtures."""

from dataclasses import dataclass, field
from itertools import count

import pytest

from ingrediquest.adapters.local_storage import BrowserLocalStorage
from ingrediquest.adapters.mealdb_client import MealDbClient
from ingrediquest.adapters.spoonacular_client import SpoonacularClient
from ingrediquest.config import Settings
from ingrediquest.containers import AppContainer
from ingrediquest.domain.sessions import AuthSession
from ingrediquest.services.cache import TtlCache
from ingrediquest.services.meal_plans import MealPlanStore
from ingrediquest.services.preferences import PreferenceStore
from ingrediquest.services.profile_mirror import RemoteProfileMirror
from ingrediquest.services.recipe_search import RecipeSearchService
from ingrediquest.services.saved_recipes import SavedRecipesStore
from ingrediquest.services.sessions import (
    IdentityProvider,
    SessionContext,
    SessionListener,
)
from ingrediquest.services.shopping_lists import ShoppingListStore
from ingrediquest.services.storage import KeyValueStorage

TEST_ANON_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoiYW5vbiJ9."
    "c2lnbmF0dXJlLWZvci10ZXN0cw"
)


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Identity provider keeping user metadata in memory."""

    session: AuthSession | None = None
    metadata: dict[str, object] = field(default_factory=dict)
    updates: list[dict[str, object]] = field(default_factory=list)
    listeners: list[SessionListener] = field(default_factory=list)
    events: list[str] | None = None
    fail_reads: bool = False
    fail_writes: bool = False
    valid_tokens: dict[str, str] = field(
        default_factory=lambda: {"access-1": "user-1"}
    )

    async def get_session(self) -> AuthSession | None:
        return self.session

    async def get_user_metadata(self) -> dict[str, object]:
        if self.fail_reads:
            raise ConnectionError("profile unavailable")
        return dict(self.metadata)

    async def update_user_metadata(self, data: dict[str, object]) -> None:
        if self.fail_writes:
            raise ConnectionError("profile unavailable")
        if self.events is not None:
            self.events.extend(f"remote:{key}" for key in data)
        self.updates.append(data)
        self.metadata.update(data)

    async def restore_session(
        self, access_token: str, refresh_token: str
    ) -> AuthSession | None:
        if access_token not in self.valid_tokens:
            raise PermissionError("invalid JWT")
        self.session = AuthSession(
            user_id=self.valid_tokens[access_token], access_token=access_token
        )
        return self.session

    async def sign_out(self) -> None:
        self.session = None

    def subscribe(self, callback: SessionListener) -> None:
        self.listeners.append(callback)


@dataclass
class RecordingStorage(KeyValueStorage):
    """In-memory storage that records the order of writes."""

    events: list[str] = field(default_factory=list)
    items: dict[str, str] = field(default_factory=dict)

    async def get(self, key: str) -> str | None:
        return self.items.get(key)

    async def set(self, key: str, value: str) -> None:
        self.events.append(f"local:{key}")
        self.items[key] = value

    async def remove(self, key: str) -> None:
        self.events.append(f"remove:{key}")
        self.items.pop(key, None)


@dataclass
class BrokenStorage(KeyValueStorage):
    """Storage whose writes raise, violating the absorb-errors contract."""

    items: dict[str, str] = field(default_factory=dict)

    async def get(self, key: str) -> str | None:
        return self.items.get(key)

    async def set(self, key: str, value: str) -> None:
        raise OSError("disk full")

    async def remove(self, key: str) -> None:
        raise OSError("disk full")


@dataclass
class SequenceClock:
    """Deterministic millisecond clock."""

    start: int = 1_700_000_000_000
    step: int = 1
    _counter: count = field(init=False)

    def __post_init__(self) -> None:
        self._counter = count(self.start, self.step)

    def __call__(self) -> int:
        return next(self._counter)


@dataclass
class FakeMealDbClient(MealDbClient):
    """TheMealDB client returning canned meals."""

    meals: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "idMeal": "52772",
                "strMeal": "Teriyaki Chicken Casserole",
                "strMealThumb": "https://www.themealdb.com/images/teriyaki.jpg",
                "strCategory": "Chicken",
            },
            {
                "idMeal": "52959",
                "strMeal": "Baked salmon with fennel & tomatoes",
                "strMealThumb": "https://www.themealdb.com/images/salmon.jpg",
                "strCategory": "Seafood",
            },
        ]
    )
    random_calls: int = 0

    async def search(self, query: str) -> list[dict[str, object]]:
        return [m for m in self.meals if query.lower() in str(m["strMeal"]).lower()]

    async def lookup(self, meal_id: int) -> dict[str, object] | None:
        return next((m for m in self.meals if m["idMeal"] == str(meal_id)), None)

    async def random(self) -> dict[str, object] | None:
        meal = self.meals[self.random_calls % len(self.meals)]
        self.random_calls += 1
        return meal

    async def categories(self) -> list[dict[str, object]]:
        return [{"strCategory": "Chicken"}, {"strCategory": "Seafood"}]

    async def filter_by_category(self, category: str) -> list[dict[str, object]]:
        return [m for m in self.meals if m["strCategory"] == category]


@dataclass
class FakeSpoonacularClient(SpoonacularClient):
    """Spoonacular client returning a canned ingredient search."""

    calls: list[list[str]] = field(default_factory=list)
    payload: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "id": 715538,
                "title": "Bruschetta Style Pork & Pasta",
                "image": "https://img.spoonacular.com/recipes/715538-312x231.jpg",
                "usedIngredientCount": 2,
                "missedIngredientCount": 3,
            }
        ]
    )

    async def find_by_ingredients(
        self, ingredients: list[str], number: int = 10
    ) -> list[dict[str, object]]:
        self.calls.append(ingredients)
        return self.payload

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        return {"id": recipe_id, "title": "Bruschetta Style Pork & Pasta"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key=TEST_ANON_KEY,
        platform="web",
    )


@pytest.fixture
def storage() -> BrowserLocalStorage:
    return BrowserLocalStorage()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def session_context(identity: FakeIdentityProvider) -> SessionContext:
    return SessionContext(identity)


@pytest.fixture
def mirror(identity: FakeIdentityProvider) -> RemoteProfileMirror:
    return RemoteProfileMirror(identity)


@pytest.fixture
def container(
    settings: Settings,
    storage: BrowserLocalStorage,
    identity: FakeIdentityProvider,
    session_context: SessionContext,
    mirror: RemoteProfileMirror,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        storage=storage,
        identity=identity,
        session_context=session_context,
        preference_store=PreferenceStore(storage),
        saved_recipes_store=SavedRecipesStore(storage, mirror, session_context),
        shopping_list_store=ShoppingListStore(
            storage, mirror, session_context, clock=SequenceClock()
        ),
        meal_plan_store=MealPlanStore(storage, clock=SequenceClock()),
        recipe_search_service=RecipeSearchService(
            mealdb=FakeMealDbClient(),
            cache=TtlCache(),
            spoonacular=FakeSpoonacularClient(),
        ),
        close_resources=close_resources,
    )
