# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from cashbook.models.base import UUIDBase, now_utc


class AuditTrailEntry(UUIDBase, table=True):
    """Append-only record of an approval or rejection decision."""

    __tablename__ = "audit_trail"

    request_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("requests.id"), nullable=False, index=True),
    )
    action: str = Field(max_length=20)
    performed_by: uuid.UUID
    details: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    created_at: datetime = Field(
        default_factory=now_utc,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
