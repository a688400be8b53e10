"""Tests for the Supabase identity adapter."""

import asyncio
from types import SimpleNamespace

from ingrediquest.adapters.supabase_identity import SupabaseIdentityProvider
from ingrediquest.domain.sessions import AuthSession


class _FakeAuth:
    def __init__(self, session: object | None, user: object | None) -> None:
        self.session = session
        self.user = user
        self.updates: list[dict[str, object]] = []
        self.callbacks: list[object] = []
        self.restored: list[tuple[str, str]] = []
        self.signed_out = False

    async def get_session(self) -> object | None:
        return self.session

    async def get_user(self) -> object | None:
        if self.user is None:
            return None
        return SimpleNamespace(user=self.user)

    async def update_user(self, attributes: dict[str, object]) -> object:
        self.updates.append(attributes)
        return SimpleNamespace(user=self.user)

    async def set_session(self, access_token: str, refresh_token: str) -> object:
        self.restored.append((access_token, refresh_token))
        user = SimpleNamespace(id="abc")
        return SimpleNamespace(
            session=SimpleNamespace(user=user, access_token=access_token), user=user
        )

    async def sign_out(self) -> None:
        self.signed_out = True

    def on_auth_state_change(self, callback) -> None:  # type: ignore[no-untyped-def]
        self.callbacks.append(callback)


def _provider(session: object | None = None, user: object | None = None):
    auth = _FakeAuth(session, user)
    return SupabaseIdentityProvider(SimpleNamespace(auth=auth)), auth


def test_get_session_maps_user_id_and_token() -> None:
    user = SimpleNamespace(id="abc", user_metadata={})
    provider, _ = _provider(SimpleNamespace(user=user, access_token="jwt"), user)

    session = asyncio.run(provider.get_session())

    assert session == AuthSession(user_id="abc", access_token="jwt")


def test_get_session_none_when_signed_out() -> None:
    provider, _ = _provider()

    assert asyncio.run(provider.get_session()) is None


def test_metadata_read_and_update() -> None:
    user = SimpleNamespace(id="abc", user_metadata={"shopping_lists": "[]"})
    provider, auth = _provider(user=user)

    assert asyncio.run(provider.get_user_metadata()) == {"shopping_lists": "[]"}

    asyncio.run(provider.update_user_metadata({"saved_recipes": "[]"}))

    assert auth.updates == [{"data": {"saved_recipes": "[]"}}]


def test_metadata_empty_without_user() -> None:
    provider, _ = _provider()

    assert asyncio.run(provider.get_user_metadata()) == {}


def test_subscribe_converts_auth_events() -> None:
    provider, auth = _provider()
    seen: list[AuthSession | None] = []
    provider.subscribe(seen.append)

    user = SimpleNamespace(id="abc")
    auth.callbacks[0]("SIGNED_IN", SimpleNamespace(user=user, access_token="jwt"))
    auth.callbacks[0]("SIGNED_OUT", None)

    assert seen == [AuthSession(user_id="abc", access_token="jwt"), None]


def test_restore_session_installs_tokens() -> None:
    provider, auth = _provider()

    session = asyncio.run(provider.restore_session("jwt", "refresh"))

    assert session == AuthSession(user_id="abc", access_token="jwt")
    assert auth.restored == [("jwt", "refresh")]


def test_sign_out_delegates_to_auth() -> None:
    provider, auth = _provider()

    asyncio.run(provider.sign_out())

    assert auth.signed_out is True
