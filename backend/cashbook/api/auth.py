# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from cashbook.api.deps import AuthDep, IdentityDep
from cashbook.db import SessionDep
from cashbook.exceptions import AuthError, StoreError
from cashbook.models.profile import Profile
from cashbook.schemas.auth import SignInPayload, TokenResponse
from cashbook.schemas.user import ProfileResponse

auth_router = APIRouter(tags=["auth"])


@auth_router.post("/auth/token", response_model=TokenResponse)
async def sign_in(payload: SignInPayload, identity: IdentityDep) -> TokenResponse:
    """Exchange email and password for a bearer token."""
    token = await identity.sign_in(payload.email, payload.password)
    if token is None:
        raise AuthError("Invalid login credentials")
    return TokenResponse(access_token=token)


@auth_router.get("/me", response_model=ProfileResponse)
async def get_profile(session: SessionDep, auth: AuthDep) -> ProfileResponse:
    """Return the caller's profile."""
    profile = await session.get(Profile, auth.user_id)
    if profile is None:
        raise StoreError("Profile not found", status_code=404)
    return ProfileResponse(
        id=profile.id,
        full_name=profile.full_name,
        role=profile.role,
        employee_id=profile.employee_id,
    )
