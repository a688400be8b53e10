"""Domain models for authenticated sessions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthSession:
    """Session issued by the identity provider."""

    user_id: str
    access_token: str | None = None
