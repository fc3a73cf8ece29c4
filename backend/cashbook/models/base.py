from __future__ import annotations

import uuid
from datetime import UTC, date, datetime, time, timedelta

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def now_utc() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


def day_bounds(start: date | None, end: date | None) -> tuple[datetime | None, datetime | None]:
    """Half-open UTC window covering ``start`` through the whole of ``end``.

    Returns ``(start 00:00, end + 1 day 00:00)``; either side may be None.
    """
    lower = datetime.combine(start, time.min, tzinfo=UTC) if start is not None else None
    upper = datetime.combine(end + timedelta(days=1), time.min, tzinfo=UTC) if end is not None else None
    return lower, upper


class UUIDBase(SQLModel):
    """Primary key shared by every table; profiles reuse the identity's UUID."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, sa_type=sa.Uuid)


class TimestampMixin(SQLModel):
    """Creation time, indexed for date-range reporting."""

    created_at: datetime = Field(
        default_factory=now_utc,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
