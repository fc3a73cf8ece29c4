# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from cashbook.api.deps import AnalystDep, ExporterDep
from cashbook.db import SessionDep
from cashbook.schemas.analytics import AnalyticsResponse, DisbursementExportResponse
from cashbook.services import analytics as analytics_service

reports_router = APIRouter(tags=["reports"])


@reports_router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics_data(
    session: SessionDep,
    auth: AnalystDep,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> AnalyticsResponse:
    """Disbursed totals by category and by day.

    ``start_date`` and ``end_date`` are calendar dates (YYYY-MM-DD), both
    inclusive. Timestamps are rejected with 400.
    """
    return await analytics_service.get_analytics_data(session, start_date, end_date)


@reports_router.get("/exports/disbursed", response_model=DisbursementExportResponse)
async def get_disbursed_requests_for_export(
    session: SessionDep,
    auth: ExporterDep,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> DisbursementExportResponse:
    """Disbursed requests with requester and manager names, newest first.

    Same date bounds as ``/analytics``: inclusive YYYY-MM-DD dates, no
    timestamps.
    """
    return await analytics_service.get_disbursed_requests_for_export(session, start_date, end_date)
