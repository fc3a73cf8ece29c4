# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from cashbook.models.enums import Role


class AuthContext(BaseModel):
    """Caller identity resolved from the bearer token on each request."""

    user_id: uuid.UUID
    email: str
    role: Role | None = None


class SignInPayload(BaseModel):
    """Request body for exchanging credentials for a bearer token."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """Bearer token issued by the identity provider."""

    access_token: str
    token_type: str = "bearer"
