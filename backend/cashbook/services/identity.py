# ruff: noqa: TC003
from __future__ import annotations

import hashlib
import hmac
import secrets
import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from cashbook.exceptions import ProviderError

_PBKDF2_ITERATIONS = 120_000


class IdentityUser(BaseModel):
    """Identity record held by the session provider."""

    id: uuid.UUID
    email: str
    email_confirmed: bool = False
    user_metadata: dict[str, str] = Field(default_factory=dict)


@runtime_checkable
class IdentityProvider(Protocol):
    """Interface for the session/identity provider."""

    async def get_user(self, token: str) -> IdentityUser | None:
        """Resolve a bearer token to its identity. Returns None if invalid."""
        ...

    async def create_user(
        self,
        email: str,
        password: str,
        *,
        email_confirm: bool = False,
        user_metadata: dict[str, str] | None = None,
    ) -> IdentityUser:
        """Create an identity. Raises ProviderError on refusal."""
        ...

    async def get_user_by_email(self, email: str) -> IdentityUser | None:
        """Look up an identity by email. Returns None if not found."""
        ...

    async def sign_in(self, email: str, password: str) -> str | None:
        """Exchange credentials for a bearer token. Returns None on mismatch."""
        ...


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode(), salt, _PBKDF2_ITERATIONS)


class InMemoryIdentityProvider:
    """In-memory implementation for development and tests.

    Identities do not survive a restart, so a configured bootstrap admin is
    recreated on every start. Production wiring installs a persistent
    provider with ``set_identity_provider``.
    """

    def __init__(self) -> None:
        self._users: dict[uuid.UUID, IdentityUser] = {}
        self._by_email: dict[str, uuid.UUID] = {}
        self._passwords: dict[uuid.UUID, tuple[bytes, bytes]] = {}
        self._tokens: dict[str, uuid.UUID] = {}

    def issue_token(self, user_id: uuid.UUID) -> str:
        """Mint a bearer token for an existing identity."""
        token = secrets.token_urlsafe(32)
        self._tokens[token] = user_id
        return token

    def count(self) -> int:
        """Number of identities held."""
        return len(self._users)

    async def get_user(self, token: str) -> IdentityUser | None:
        """Resolve a bearer token to its identity. Returns None if invalid."""
        user_id = self._tokens.get(token)
        if user_id is None:
            return None
        return self._users.get(user_id)

    async def get_user_by_email(self, email: str) -> IdentityUser | None:
        """Look up an identity by email. Returns None if not found."""
        user_id = self._by_email.get(email.strip().lower())
        return self._users.get(user_id) if user_id is not None else None

    async def create_user(
        self,
        email: str,
        password: str,
        *,
        email_confirm: bool = False,
        user_metadata: dict[str, str] | None = None,
    ) -> IdentityUser:
        """Create an identity. Raises ProviderError on refusal."""
        normalized = email.strip().lower()
        if "@" not in normalized:
            raise ProviderError("Unable to validate email address: invalid format")
        if len(password) < 6:
            raise ProviderError("Password should be at least 6 characters")
        if normalized in self._by_email:
            raise ProviderError("A user with this email address has already been registered")

        user = IdentityUser(
            id=uuid.uuid4(),
            email=normalized,
            email_confirmed=email_confirm,
            user_metadata=dict(user_metadata or {}),
        )
        salt = secrets.token_bytes(16)
        self._users[user.id] = user
        self._by_email[normalized] = user.id
        self._passwords[user.id] = (salt, _hash_password(password, salt))
        return user

    async def sign_in(self, email: str, password: str) -> str | None:
        """Exchange credentials for a bearer token. Returns None on mismatch."""
        user = await self.get_user_by_email(email)
        if user is None:
            return None
        salt, expected = self._passwords[user.id]
        if not hmac.compare_digest(expected, _hash_password(password, salt)):
            return None
        return self.issue_token(user.id)


_identity_provider: IdentityProvider = InMemoryIdentityProvider()


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency for the identity provider."""
    return _identity_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Override the provider (for testing or production wiring)."""
    global _identity_provider
    _identity_provider = provider
