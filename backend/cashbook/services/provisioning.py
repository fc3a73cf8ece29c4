# ruff: noqa: TC003
"""Privileged account creation and employee ID allocation."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import col

from cashbook.config import get_settings
from cashbook.exceptions import AppError, ForbiddenError, InternalError, ValidationError
from cashbook.models.base import now_utc
from cashbook.models.enums import Capability, Role
from cashbook.models.profile import Profile
from cashbook.schemas.user import CreateUserResponse, NextEmployeeIdResponse
from cashbook.services.capability import has_capability

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from cashbook.schemas.auth import AuthContext
    from cashbook.schemas.user import CreateUserPayload
    from cashbook.services.identity import IdentityProvider

logger = logging.getLogger(__name__)


def next_employee_id_after(max_id: int | None) -> int:
    """Next employee ID given the highest allocated one.

    None starts the sequence; otherwise max + 1, capped at the top of the range.
    """
    settings = get_settings()
    if max_id is None:
        return settings.employee_id_start
    return min(settings.employee_id_max, max_id + 1)


async def compute_next_employee_id(session: AsyncSession) -> int:
    """Read the highest non-null employee ID and return the one after it."""
    result = await session.execute(
        select(func.max(Profile.employee_id)).where(col(Profile.employee_id).is_not(None))
    )
    return next_employee_id_after(result.scalar_one_or_none())


async def get_next_employee_id(session: AsyncSession) -> NextEmployeeIdResponse:
    """Advisory preview of the next employee ID; falls back to the range start on error."""
    try:
        employee_id = await compute_next_employee_id(session)
    except SQLAlchemyError:
        logger.exception("Next employee ID lookup failed")
        employee_id = get_settings().employee_id_start
    return NextEmployeeIdResponse(employee_id=employee_id)


async def write_profile(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    full_name: str,
    role: Role,
    employee_id: int,
) -> int | None:
    """Create or update a profile, claiming ``employee_id``.

    The unique constraint on ``employee_id`` serializes allocation: when the
    claimed ID is taken, the write is rolled back, the next free ID recomputed
    and the write retried. Returns the stored ID, or None when every attempt
    failed (logged, not raised).
    """
    attempts = get_settings().employee_id_allocation_attempts
    for attempt in range(1, attempts + 1):
        try:
            profile = await session.get(Profile, user_id)
            if profile is None:
                profile = Profile(id=user_id)
                session.add(profile)
            profile.full_name = full_name
            profile.role = role.value
            profile.employee_id = employee_id
            profile.updated_at = now_utc()
            await session.commit()
        except IntegrityError:
            await session.rollback()
            logger.warning(
                "Employee ID %d already taken for user %s (attempt %d/%d)", employee_id, user_id, attempt, attempts
            )
            try:
                employee_id = await compute_next_employee_id(session)
            except SQLAlchemyError:
                logger.exception("Employee ID recompute failed for user %s", user_id)
                return None
        except SQLAlchemyError:
            await session.rollback()
            logger.exception("Profile update failed for user %s", user_id)
            return None
        else:
            return employee_id

    logger.error("Could not allocate an employee ID for user %s after %d attempts", user_id, attempts)
    return None


async def create_user(
    session: AsyncSession,
    auth: AuthContext,
    identity: IdentityProvider,
    payload: CreateUserPayload,
) -> CreateUserResponse:
    """Provision a new account (admin only).

    Flow:
    1. Require the manage-users capability on the caller's profile
    2. Validate email, password, full_name and role
    3. Compute the next employee ID
    4. Create the identity (provider refusal surfaces as ProviderError)
    5. Write the profile; failures here are logged, the identity is kept
    6. Return the new account summary

    The caller's token has already been verified by the auth dependency.
    Unexpected failures surface as a generic InternalError.
    """
    if not has_capability(auth.role, Capability.MANAGE_USERS):
        raise ForbiddenError("Forbidden: admin role required")

    if not payload.email or not payload.password or not payload.full_name or not payload.role:
        raise ValidationError("email, password, full_name, and role are required")
    if payload.role not in {r.value for r in Role}:
        raise ValidationError("role must be employee, manager, accountant, or admin")
    role = Role(payload.role)

    try:
        employee_id = await compute_next_employee_id(session)

        user = await identity.create_user(
            payload.email,
            payload.password,
            email_confirm=True,
            user_metadata={"full_name": payload.full_name},
        )

        stored_id = await write_profile(
            session,
            user.id,
            full_name=payload.full_name,
            role=role,
            employee_id=employee_id,
        )
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Provisioning failed for %s", payload.email)
        raise InternalError from exc

    if stored_id is not None:
        employee_id = stored_id
    logger.info("User %s provisioned as %s with employee ID %d by %s", user.id, role, employee_id, auth.user_id)
    return CreateUserResponse(
        user_id=user.id,
        employee_id=employee_id,
        email=user.email,
        full_name=payload.full_name,
        role=role.value,
    )


async def ensure_bootstrap_admin(session: AsyncSession, identity: IdentityProvider) -> uuid.UUID | None:
    """Create the configured first admin account if it does not exist yet."""
    settings = get_settings()
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        return None

    user = await identity.get_user_by_email(settings.bootstrap_admin_email)
    if user is None:
        user = await identity.create_user(
            settings.bootstrap_admin_email,
            settings.bootstrap_admin_password,
            email_confirm=True,
            user_metadata={"full_name": settings.bootstrap_admin_name},
        )
        logger.info("Bootstrap admin identity %s created", user.email)

    existing = await session.get(Profile, user.id)
    if existing is not None and existing.role == Role.ADMIN:
        return user.id

    employee_id = existing.employee_id if existing is not None and existing.employee_id else None
    if employee_id is None:
        employee_id = await compute_next_employee_id(session)
    await write_profile(
        session,
        user.id,
        full_name=settings.bootstrap_admin_name,
        role=Role.ADMIN,
        employee_id=employee_id,
    )
    return user.id
