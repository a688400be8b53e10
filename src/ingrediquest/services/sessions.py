"""Session tracking for the signed-in user."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from ingrediquest.domain.sessions import AuthSession

logger = logging.getLogger(__name__)

SessionListener = Callable[[AuthSession | None], None]


class IdentityProvider(Protocol):
    """Interface for the external identity/session service."""

    async def get_session(self) -> AuthSession | None:
        """Return the current session, if signed in."""

    async def get_user_metadata(self) -> dict[str, object]:
        """Return the signed-in user's profile metadata."""

    async def update_user_metadata(self, data: dict[str, object]) -> None:
        """Merge key/value pairs into the user's profile metadata."""

    async def restore_session(
        self, access_token: str, refresh_token: str
    ) -> AuthSession | None:
        """Adopt a session issued elsewhere and return it."""

    async def sign_out(self) -> None:
        """Drop the current session."""

    def subscribe(self, callback: SessionListener) -> None:
        """Call ``callback`` with the new session on sign-in and sign-out."""


@dataclass
class SessionContext:
    """Holds a read-only reference to the current session.

    Stores consult ``user_id`` to decide whether to mirror remotely; they
    never change the session themselves.
    """

    identity: IdentityProvider
    session: AuthSession | None = None
    listeners: list[SessionListener] = field(default_factory=list)

    @property
    def user_id(self) -> str | None:
        """Return the signed-in user id, if any."""
        return self.session.user_id if self.session else None

    def subscribe(self, listener: SessionListener) -> None:
        """Register a callback fired when the signed-in user changes."""
        self.listeners.append(listener)

    def set_session(self, session: AuthSession | None) -> bool:
        """Replace the session and return True when the user changed."""
        previous_user_id = self.user_id
        self.session = session
        if self.user_id == previous_user_id:
            return False
        logger.info(
            "Session user changed: signed_in=%s", self.user_id is not None
        )
        for listener in list(self.listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener failed")
        return True

    async def refresh(self) -> AuthSession | None:
        """Read the current session from the identity provider."""
        try:
            session = await self.identity.get_session()
        except Exception:
            logger.exception("Error getting current session")
            session = None
        self.set_session(session)
        return session
