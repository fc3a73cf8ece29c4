from __future__ import annotations

from pydantic import BaseModel

from cashbook.schemas.request import PersonName, RequestResponse


class CategoryTotal(BaseModel):
    """Disbursed total for one category (pie chart slice)."""

    name: str
    value: float


class DateTotal(BaseModel):
    """Disbursed total for one calendar day (trend point)."""

    date: str
    amount: float


class AnalyticsResponse(BaseModel):
    """Disbursement aggregates. ``error`` is set when the read failed."""

    by_category: list[CategoryTotal]
    by_date: list[DateTotal]
    error: str | None = None


class DisbursementExportItem(RequestResponse):
    """A disbursed request joined with requester and manager names."""

    requester: PersonName | None
    manager: PersonName | None


class DisbursementExportResponse(BaseModel):
    """Disbursed requests for accounting export."""

    items: list[DisbursementExportItem]
    total: int
