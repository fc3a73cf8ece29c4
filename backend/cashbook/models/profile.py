# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from cashbook.models.base import UUIDBase
from cashbook.models.enums import Role


class Profile(UUIDBase, table=True):
    """Application-level user record linked 1:1 to an identity."""

    __tablename__ = "profiles"

    full_name: str | None = Field(default=None, max_length=255)
    role: str = Field(default=Role.EMPLOYEE, max_length=20, sa_column_kwargs={"server_default": "employee"})
    employee_id: int | None = Field(default=None, sa_column=sa.Column(sa.Integer, unique=True, nullable=True))
    updated_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
