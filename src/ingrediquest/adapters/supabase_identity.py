"""Supabase Auth adapter for sessions and profile metadata."""

import logging
from dataclasses import dataclass

from supabase import AsyncClient

from ingrediquest.domain.sessions import AuthSession
from ingrediquest.services.sessions import IdentityProvider, SessionListener

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Reads the Supabase session and the user's ``user_metadata``."""

    client: AsyncClient

    async def get_session(self) -> AuthSession | None:
        """Return the current session, if signed in."""
        session = await self.client.auth.get_session()
        return _to_auth_session(session)

    async def get_user_metadata(self) -> dict[str, object]:
        """Return the signed-in user's metadata."""
        response = await self.client.auth.get_user()
        if response is None or response.user is None:
            return {}
        return dict(response.user.user_metadata or {})

    async def update_user_metadata(self, data: dict[str, object]) -> None:
        """Merge key/value pairs into the user's metadata."""
        await self.client.auth.update_user({"data": data})

    async def restore_session(
        self, access_token: str, refresh_token: str
    ) -> AuthSession | None:
        """Install tokens issued by the mobile client's sign-in."""
        response = await self.client.auth.set_session(access_token, refresh_token)
        return _to_auth_session(getattr(response, "session", None))

    async def sign_out(self) -> None:
        """Sign out of Supabase Auth."""
        await self.client.auth.sign_out()

    def subscribe(self, callback: SessionListener) -> None:
        """Invoke ``callback`` with the new session on every auth event."""

        def _on_change(event: object, session: object) -> None:
            logger.info("Auth state changed: %s", event)
            callback(_to_auth_session(session))

        self.client.auth.on_auth_state_change(_on_change)


def _to_auth_session(session: object) -> AuthSession | None:
    """Convert a Supabase session into the domain model."""
    user = getattr(session, "user", None)
    if session is None or user is None:
        return None
    return AuthSession(
        user_id=str(user.id),
        access_token=getattr(session, "access_token", None),
    )
