"""Tests for disbursement analytics and the accounting export."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from cashbook.models.request import PettyCashRequest
from cashbook.services.analytics import aggregate_disbursements, get_analytics_data

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient

ANALYTICS_URL = "/analytics"
EXPORT_URL = "/exports/disbursed"


async def _insert(
    session: AsyncSession,
    requester_id: uuid.UUID,
    created_at: datetime,
    *,
    amount: str = "1000",
    category: str | None = "Office",
    status: str = "disbursed",
    manager_id: uuid.UUID | None = None,
) -> PettyCashRequest:
    request = PettyCashRequest(
        requester_id=requester_id,
        amount=Decimal(amount),
        purpose="Seeded",
        category=category,
        status=status,
        manager_id=manager_id,
        created_at=created_at,
    )
    session.add(request)
    await session.commit()
    return request


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def test_aggregate_groups_by_category_and_day() -> None:
    rows = [
        (Decimal("5000"), "Travel", datetime(2024, 2, 10, 9, tzinfo=UTC)),
        (Decimal("2500"), "Travel", datetime(2024, 2, 3, 12, tzinfo=UTC)),
        (Decimal("1200"), "Food", datetime(2024, 2, 10, 18, tzinfo=UTC)),
    ]
    by_category, by_date = aggregate_disbursements(rows)

    assert {c.name: c.value for c in by_category} == {"Travel": 7500, "Food": 1200}
    assert [(d.date, d.amount) for d in by_date] == [("2024-02-03", 2500), ("2024-02-10", 6200)]


def test_aggregate_coerces_missing_category_and_timestamp() -> None:
    rows = [
        (Decimal("300"), None, None),
        (Decimal("700"), "", datetime(2024, 1, 2, tzinfo=UTC)),
    ]
    by_category, by_date = aggregate_disbursements(rows)

    assert [(c.name, c.value) for c in by_category] == [("Uncategorized", 1000)]
    assert [(d.date, d.amount) for d in by_date] == [("2024-01-02", 700), ("unknown", 300)]


def test_aggregate_empty() -> None:
    assert aggregate_disbursements([]) == ([], [])


# ---------------------------------------------------------------------------
# Analytics endpoint
# ---------------------------------------------------------------------------


async def test_analytics_counts_only_disbursed(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_account: Callable[..., Awaitable],
) -> None:
    employee = await make_account("employee")
    manager = await make_account("manager")
    await _insert(db_session, employee.id, datetime(2024, 2, 5, tzinfo=UTC), amount="4000", category="Travel")
    await _insert(db_session, employee.id, datetime(2024, 2, 1, tzinfo=UTC), amount="1000", category=None)
    await _insert(db_session, employee.id, datetime(2024, 2, 5, tzinfo=UTC), amount="9999", status="approved")

    resp = await async_client.get(ANALYTICS_URL, headers=manager.headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["error"] is None
    assert sorted((c["name"], c["value"]) for c in data["by_category"]) == [
        ("Travel", 4000),
        ("Uncategorized", 1000),
    ]
    assert data["by_date"] == [
        {"date": "2024-02-01", "amount": 1000},
        {"date": "2024-02-05", "amount": 4000},
    ]


async def test_analytics_date_range_is_inclusive(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_account: Callable[..., Awaitable],
) -> None:
    employee = await make_account("employee")
    accountant = await make_account("accountant")
    await _insert(db_session, employee.id, datetime(2024, 1, 31, 23, 59, tzinfo=UTC), amount="1")
    await _insert(db_session, employee.id, datetime(2024, 2, 1, 0, 0, tzinfo=UTC), amount="10")
    await _insert(db_session, employee.id, datetime(2024, 2, 29, 17, 30, tzinfo=UTC), amount="100")
    await _insert(db_session, employee.id, datetime(2024, 3, 1, 0, 0, tzinfo=UTC), amount="1000")

    resp = await async_client.get(
        ANALYTICS_URL,
        params={"start_date": "2024-02-01", "end_date": "2024-02-29"},
        headers=accountant.headers,
    )

    assert resp.status_code == 200
    assert resp.json()["by_date"] == [
        {"date": "2024-02-01", "amount": 10},
        {"date": "2024-02-29", "amount": 100},
    ]


async def test_analytics_requires_reporting_role(
    async_client: AsyncClient, make_account: Callable[..., Awaitable]
) -> None:
    employee = await make_account("employee")
    resp = await async_client.get(ANALYTICS_URL, headers=employee.headers)
    assert resp.status_code == 403


async def test_analytics_read_failure_returns_empty_with_error() -> None:
    session = AsyncMock(spec=AsyncSession)
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection reset"))

    result = await get_analytics_data(session, date(2024, 2, 1), date(2024, 2, 29))

    assert result.by_category == []
    assert result.by_date == []
    assert result.error == "Failed to load analytics data"


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


async def test_export_february_newest_first(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_account: Callable[..., Awaitable],
) -> None:
    employee = await make_account("employee", full_name="Awa Diallo")
    manager = await make_account("manager", full_name="Moussa Kane")
    accountant = await make_account("accountant")

    await _insert(db_session, employee.id, datetime(2024, 1, 31, 22, tzinfo=UTC), manager_id=manager.id)
    feb_1 = await _insert(db_session, employee.id, datetime(2024, 2, 1, 8, tzinfo=UTC), manager_id=manager.id)
    feb_15 = await _insert(db_session, employee.id, datetime(2024, 2, 15, 8, tzinfo=UTC), manager_id=manager.id)
    feb_29 = await _insert(db_session, employee.id, datetime(2024, 2, 29, 16, tzinfo=UTC), manager_id=manager.id)
    await _insert(db_session, employee.id, datetime(2024, 2, 20, tzinfo=UTC), status="approved")
    await _insert(db_session, employee.id, datetime(2024, 3, 1, 1, tzinfo=UTC), manager_id=manager.id)

    resp = await async_client.get(
        EXPORT_URL,
        params={"start_date": "2024-02-01", "end_date": "2024-02-29"},
        headers=accountant.headers,
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 3
    assert [item["id"] for item in data["items"]] == [str(feb_29.id), str(feb_15.id), str(feb_1.id)]
    assert data["items"][0]["requester"] == {"full_name": "Awa Diallo"}
    assert data["items"][0]["manager"] == {"full_name": "Moussa Kane"}
    assert all(item["status"] == "disbursed" for item in data["items"])


async def test_export_without_range_and_without_manager(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_account: Callable[..., Awaitable],
) -> None:
    employee = await make_account("employee")
    admin = await make_account("admin")
    await _insert(db_session, employee.id, datetime(2023, 6, 1, tzinfo=UTC))

    resp = await async_client.get(EXPORT_URL, headers=admin.headers)

    assert resp.status_code == 200
    (item,) = resp.json()["items"]
    assert item["manager"] is None


async def test_export_is_for_accounting(async_client: AsyncClient, make_account: Callable[..., Awaitable]) -> None:
    manager = await make_account("manager")
    resp = await async_client.get(EXPORT_URL, headers=manager.headers)
    assert resp.status_code == 403


async def test_export_rejects_malformed_dates(
    async_client: AsyncClient, make_account: Callable[..., Awaitable]
) -> None:
    accountant = await make_account("accountant")
    resp = await async_client.get(EXPORT_URL, params={"start_date": "February"}, headers=accountant.headers)
    assert resp.status_code == 400


async def test_report_bounds_are_dates_not_timestamps(
    async_client: AsyncClient, make_account: Callable[..., Awaitable]
) -> None:
    accountant = await make_account("accountant")
    for url in (ANALYTICS_URL, EXPORT_URL):
        resp = await async_client.get(
            url, params={"start_date": "2024-02-01T08:30:00Z"}, headers=accountant.headers
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "ValidationError"
