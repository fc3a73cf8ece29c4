# ruff: noqa: B008
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header

from cashbook.db import SessionDep
from cashbook.exceptions import AuthError, ForbiddenError
from cashbook.models.enums import Capability, Role
from cashbook.models.profile import Profile
from cashbook.schemas.auth import AuthContext
from cashbook.services.capability import has_capability
from cashbook.services.identity import IdentityProvider, get_identity_provider
from cashbook.services.storage import BlobStore, get_blob_store

IdentityDep = Annotated[IdentityProvider, Depends(get_identity_provider)]
BlobStoreDep = Annotated[BlobStore, Depends(get_blob_store)]


def _bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise AuthError("Missing authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Unauthorized")
    return token.strip()


async def get_auth_context(
    session: SessionDep,
    identity: IdentityDep,
    authorization: str | None = Header(default=None),
) -> AuthContext:
    """Resolve the caller from the bearer token and attach the profile role."""
    token = _bearer_token(authorization)
    user = await identity.get_user(token)
    if user is None:
        raise AuthError("Unauthorized")

    profile = await session.get(Profile, user.id)
    role: Role | None = None
    if profile is not None and profile.role in {r.value for r in Role}:
        role = Role(profile.role)
    return AuthContext(user_id=user.id, email=user.email, role=role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


def require_capability(capability: Capability):  # noqa: ANN201
    """Build a dependency that rejects callers whose role lacks ``capability``."""

    async def _check(auth: AuthDep) -> AuthContext:
        if not has_capability(auth.role, capability):
            raise ForbiddenError(f"Missing capability: {capability}")
        return auth

    return _check


ReviewerDep = Annotated[AuthContext, Depends(require_capability(Capability.REVIEW_REQUESTS))]
DisburserDep = Annotated[AuthContext, Depends(require_capability(Capability.DISBURSE_REQUESTS))]
AnalystDep = Annotated[AuthContext, Depends(require_capability(Capability.VIEW_ANALYTICS))]
ExporterDep = Annotated[AuthContext, Depends(require_capability(Capability.EXPORT_DISBURSEMENTS))]
AdminDep = Annotated[AuthContext, Depends(require_capability(Capability.MANAGE_USERS))]
