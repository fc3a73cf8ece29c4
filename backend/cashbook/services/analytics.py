"""Reporting over disbursed requests: chart aggregates and accounting export."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.orm import aliased
from sqlmodel import col

from cashbook.models.base import day_bounds
from cashbook.models.enums import RequestStatus
from cashbook.models.profile import Profile
from cashbook.models.request import PettyCashRequest
from cashbook.schemas.analytics import (
    AnalyticsResponse,
    CategoryTotal,
    DateTotal,
    DisbursementExportItem,
    DisbursementExportResponse,
)
from cashbook.schemas.request import PersonName
from cashbook.services.request import request_fields

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
UNKNOWN_DATE = "unknown"


def created_at_filters(start_date: date | None, end_date: date | None) -> list[Any]:
    """Inclusive calendar-day bounds on ``created_at`` (UTC days).

    ``end_date`` covers the whole day, so the upper bound is the following
    midnight, exclusive.
    """
    lower, upper = day_bounds(start_date, end_date)
    filters: list[Any] = []
    if lower is not None:
        filters.append(col(PettyCashRequest.created_at) >= lower)
    if upper is not None:
        filters.append(col(PettyCashRequest.created_at) < upper)
    return filters


def aggregate_disbursements(
    rows: list[tuple[Decimal, str | None, datetime | None]],
) -> tuple[list[CategoryTotal], list[DateTotal]]:
    """Sum amounts per category and per ISO day.

    Category totals keep first-seen order; day totals are sorted ascending by
    date string.
    """
    by_category: dict[str, Decimal] = {}
    by_date: dict[str, Decimal] = {}
    for amount, category, created_at in rows:
        value = Decimal(amount)
        cat = category or UNCATEGORIZED
        by_category[cat] = by_category.get(cat, Decimal(0)) + value

        day = created_at.isoformat()[:10] if created_at is not None else UNKNOWN_DATE
        by_date[day] = by_date.get(day, Decimal(0)) + value

    return (
        [CategoryTotal(name=name, value=float(total)) for name, total in by_category.items()],
        [DateTotal(date=day, amount=float(total)) for day, total in sorted(by_date.items())],
    )


async def get_analytics_data(
    session: AsyncSession,
    start_date: date | None = None,
    end_date: date | None = None,
) -> AnalyticsResponse:
    """Aggregate disbursed requests by category and by day.

    A failed read yields empty aggregates and an error message instead of
    raising.
    """
    try:
        result = await session.execute(
            select(PettyCashRequest.amount, PettyCashRequest.category, PettyCashRequest.created_at).where(
                col(PettyCashRequest.status) == RequestStatus.DISBURSED.value,
                *created_at_filters(start_date, end_date),
            )
        )
        rows = [tuple(row) for row in result.all()]
    except Exception:
        logger.exception("Analytics read failed")
        return AnalyticsResponse(by_category=[], by_date=[], error="Failed to load analytics data")

    by_category, by_date = aggregate_disbursements(rows)  # type: ignore[arg-type]
    return AnalyticsResponse(by_category=by_category, by_date=by_date)


async def get_disbursed_requests_for_export(
    session: AsyncSession,
    start_date: date | None = None,
    end_date: date | None = None,
) -> DisbursementExportResponse:
    """Disbursed requests with requester and manager names, newest first."""
    requester = aliased(Profile)
    manager = aliased(Profile)
    result = await session.execute(
        select(
            PettyCashRequest,
            requester.full_name.label("requester_name"),  # type: ignore[attr-defined]
            manager.full_name.label("manager_name"),  # type: ignore[attr-defined]
        )
        .outerjoin(requester, requester.id == PettyCashRequest.requester_id)
        .outerjoin(manager, manager.id == PettyCashRequest.manager_id)
        .where(
            col(PettyCashRequest.status) == RequestStatus.DISBURSED.value,
            *created_at_filters(start_date, end_date),
        )
        .order_by(col(PettyCashRequest.created_at).desc())
    )
    items = [
        DisbursementExportItem(
            **request_fields(request),
            requester=PersonName(full_name=requester_name),
            manager=PersonName(full_name=manager_name) if request.manager_id is not None else None,
        )
        for request, requester_name, manager_name in result.all()
    ]
    return DisbursementExportResponse(items=items, total=len(items))
