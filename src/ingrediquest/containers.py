"""Dependency container wiring for the application."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from supabase import AsyncClient

from ingrediquest.adapters.local_storage import BrowserLocalStorage
from ingrediquest.adapters.mealdb_client import HttpxMealDbClient
from ingrediquest.adapters.spoonacular_client import HttpxSpoonacularClient
from ingrediquest.adapters.sqlite_storage import SqliteDeviceStorage
from ingrediquest.adapters.supabase_identity import SupabaseIdentityProvider
from ingrediquest.config import WEB_PLATFORM, Settings, parse_platform
from ingrediquest.domain.sessions import AuthSession
from ingrediquest.services.cache import TtlCache
from ingrediquest.services.meal_plans import MealPlanStore
from ingrediquest.services.preferences import PreferenceStore
from ingrediquest.services.profile_mirror import RemoteProfileMirror
from ingrediquest.services.recipe_search import RecipeSearchService
from ingrediquest.services.saved_recipes import SavedRecipesStore
from ingrediquest.services.sessions import IdentityProvider, SessionContext
from ingrediquest.services.shopping_lists import ShoppingListStore
from ingrediquest.services.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class SessionRejected(Exception):
    """Raised when the identity provider does not accept session tokens."""


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    storage: KeyValueStorage
    identity: IdentityProvider
    session_context: SessionContext
    preference_store: PreferenceStore
    saved_recipes_store: SavedRecipesStore
    shopping_list_store: ShoppingListStore
    meal_plan_store: MealPlanStore
    recipe_search_service: RecipeSearchService
    close_resources: Callable[[], Awaitable[None]]
    _pending: set[asyncio.Task[None]] = field(default_factory=set)

    async def load_all(self) -> None:
        """Initial load of every store.

        The meal plan is only read for a signed-in user; otherwise the
        starter week is shown.
        """
        await self.preference_store.load()
        await self.saved_recipes_store.load()
        await self.shopping_list_store.load()
        if self.session_context.user_id is not None:
            await self.meal_plan_store.load()

    async def refresh_session(self) -> AuthSession | None:
        """Read the current session from the identity provider."""
        return await self.session_context.refresh()

    async def sign_in(self, access_token: str, refresh_token: str) -> AuthSession:
        """Adopt an externally issued session and reload dependent stores.

        Raises ``SessionRejected`` when the identity provider refuses the tokens.
        """
        try:
            session = await self.identity.restore_session(access_token, refresh_token)
        except Exception as exc:
            logger.exception("Error restoring session")
            raise SessionRejected("Session tokens were rejected") from exc
        if session is None:
            raise SessionRejected("Session tokens were rejected")
        await self.handle_session_change(session)
        return session

    async def sign_out(self) -> None:
        """Drop the session and reload dependent stores."""
        try:
            await self.identity.sign_out()
        except Exception:
            logger.exception("Error signing out")
        await self.handle_session_change(None)

    async def handle_session_change(self, session: AuthSession | None) -> None:
        """Record a new session and reload the stores that depend on it."""
        if not self.session_context.set_session(session):
            return
        await self.saved_recipes_store.load()
        await self.shopping_list_store.load()
        if self.session_context.user_id is None:
            await self.meal_plan_store.reset()
        else:
            await self.meal_plan_store.load()

    def follow_auth_events(self) -> None:
        """Reload session-aware stores whenever the identity provider signals.

        Must be called from within a running event loop.
        """
        loop = asyncio.get_running_loop()

        def _schedule(session: AuthSession | None) -> None:
            task = loop.create_task(self.handle_session_change(session))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        self.identity.subscribe(_schedule)


def create_storage(settings: Settings) -> KeyValueStorage:
    """Select the storage backend for the configured platform."""
    if parse_platform(settings.platform) == WEB_PLATFORM:
        logger.info("Using browser local storage")
        return BrowserLocalStorage()
    logger.info("Using device storage at %s", settings.storage_path)
    return SqliteDeviceStorage.create(settings.storage_path)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = AsyncClient(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    storage = create_storage(resolved_settings)
    identity = SupabaseIdentityProvider(supabase_client)
    session_context = SessionContext(identity)
    mirror = RemoteProfileMirror(identity)

    mealdb_client = HttpxMealDbClient.create(resolved_settings.mealdb_base_url)
    spoonacular_client = (
        HttpxSpoonacularClient.create(
            api_key=resolved_settings.spoonacular_api_key,
            base_url=resolved_settings.spoonacular_base_url,
        )
        if resolved_settings.spoonacular_api_key
        else None
    )
    recipe_search_service = RecipeSearchService(
        mealdb=mealdb_client,
        cache=TtlCache(),
        spoonacular=spoonacular_client,
        ttl_seconds=resolved_settings.search_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        await mealdb_client.close()
        if spoonacular_client is not None:
            await spoonacular_client.close()

    return AppContainer(
        settings=resolved_settings,
        storage=storage,
        identity=identity,
        session_context=session_context,
        preference_store=PreferenceStore(storage),
        saved_recipes_store=SavedRecipesStore(storage, mirror, session_context),
        shopping_list_store=ShoppingListStore(storage, mirror, session_context),
        meal_plan_store=MealPlanStore(storage),
        recipe_search_service=recipe_search_service,
        close_resources=close_resources,
    )
