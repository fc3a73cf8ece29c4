# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel


class CreateUserPayload(BaseModel):
    """Request body for privileged account creation.

    Every field is optional at the schema level; presence and the role enum
    are checked by the provisioning service so the caller gets a 400 with a
    single readable message.
    """

    email: str | None = None
    password: str | None = None
    full_name: str | None = None
    role: str | None = None


class CreateUserResponse(BaseModel):
    """Result of a successful provisioning call."""

    user_id: uuid.UUID
    employee_id: int
    email: str
    full_name: str
    role: str


class NextEmployeeIdResponse(BaseModel):
    """Advisory preview of the next employee ID."""

    employee_id: int


class ProfileResponse(BaseModel):
    """The caller's own profile."""

    id: uuid.UUID
    full_name: str | None
    role: str
    employee_id: int | None
