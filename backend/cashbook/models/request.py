# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from cashbook.models.base import TimestampMixin, UUIDBase
from cashbook.models.enums import RequestStatus


class PettyCashRequest(UUIDBase, TimestampMixin, table=True):
    """An employee's petty-cash claim with approval and disbursement state."""

    __tablename__ = "requests"
    __table_args__ = (sa.Index("ix_requests_status_created", "status", "created_at"),)

    requester_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("profiles.id"), nullable=False, index=True),
    )
    amount: Decimal = Field(sa_type=sa.Numeric(14, 2))  # ty: ignore[invalid-argument-type]
    purpose: str
    category: str | None = Field(default=None, max_length=50)
    receipt_url: str | None = None
    status: str = Field(
        default=RequestStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "pending"}
    )
    manager_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("profiles.id"), nullable=True),
    )
    rejection_reason: str | None = None
    manager_comment: str | None = None
    updated_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
