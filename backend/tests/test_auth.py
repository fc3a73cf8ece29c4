"""Tests for sign-in, the caller's profile and bearer token resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient


async def test_sign_in_issues_usable_token(async_client: AsyncClient, make_account: Callable[..., Awaitable]) -> None:
    account = await make_account("manager", full_name="Moussa Kane", employee_id=10004)

    resp = await async_client.post("/auth/token", json={"email": account.email, "password": "secret-password"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["token_type"] == "bearer"

    me = await async_client.get("/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json() == {
        "id": str(account.id),
        "full_name": "Moussa Kane",
        "role": "manager",
        "employee_id": 10004,
    }


async def test_sign_in_email_is_case_insensitive(
    async_client: AsyncClient, make_account: Callable[..., Awaitable]
) -> None:
    account = await make_account("employee")
    resp = await async_client.post(
        "/auth/token", json={"email": account.email.upper(), "password": "secret-password"}
    )
    assert resp.status_code == 200


async def test_sign_in_wrong_password(async_client: AsyncClient, make_account: Callable[..., Awaitable]) -> None:
    account = await make_account("employee")
    resp = await async_client.post("/auth/token", json={"email": account.email, "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid login credentials"


async def test_sign_in_unknown_email(async_client: AsyncClient) -> None:
    resp = await async_client.post("/auth/token", json={"email": "ghost@example.com", "password": "whatever"})
    assert resp.status_code == 401


async def test_me_without_profile(async_client: AsyncClient, make_account: Callable[..., Awaitable]) -> None:
    orphan = await make_account(role=None)
    resp = await async_client.get("/me", headers=orphan.headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "StoreError"


async def test_me_requires_bearer_scheme(async_client: AsyncClient, make_account: Callable[..., Awaitable]) -> None:
    account = await make_account("employee")
    token = account.headers["Authorization"].removeprefix("Bearer ")

    resp = await async_client.get("/me", headers={"Authorization": token})
    assert resp.status_code == 401

    resp = await async_client.get("/me")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Missing authorization header"
