"""Seed script for development data.

Start the API with BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD set, then
run with:  python -m cashbook.seed
"""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Any

import httpx

BASE_URL = os.environ.get("CASHBOOK_URL", "http://localhost:8000")
ADMIN_EMAIL = os.environ.get("BOOTSTRAP_ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.environ.get("BOOTSTRAP_ADMIN_PASSWORD", "admin-password")
DEMO_PASSWORD = "demo-password"

USERS = [
    {"email": "awa.diallo@example.com", "full_name": "Awa Diallo", "role": "employee"},
    {"email": "moussa.kane@example.com", "full_name": "Moussa Kane", "role": "manager"},
    {"email": "fatou.ndiaye@example.com", "full_name": "Fatou Ndiaye", "role": "accountant"},
]

REQUESTS = [
    {"amount": "5000", "purpose": "Taxi to client meeting", "category": "Travel"},
    {"amount": "12500", "purpose": "Printer paper and toner", "category": "Supplies"},
    {"amount": "3200", "purpose": "Team lunch", "category": "Food"},
]


def _headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def _sign_in(client: httpx.AsyncClient, email: str, password: str) -> str | None:
    resp = await client.post(f"{BASE_URL}/auth/token", json={"email": email, "password": password})
    if resp.status_code != 200:
        print(f"  [ERROR] Sign-in failed for {email}: {resp.status_code} {resp.text}")
        return None
    token: str = resp.json()["access_token"]
    return token


async def seed_users(client: httpx.AsyncClient, admin_token: str) -> dict[str, str]:
    """Create demo accounts and return role -> bearer token."""
    print("\n--- Users ---")
    tokens: dict[str, str] = {}
    for user in USERS:
        resp = await client.post(
            f"{BASE_URL}/create-user",
            json={**user, "password": DEMO_PASSWORD},
            headers=_headers(admin_token),
        )
        if resp.status_code == 200:
            print(f"  [OK] {user['full_name']} ({user['role']}) employee_id={resp.json()['employee_id']}")
        elif resp.status_code == 400:
            print(f"  [SKIP] {user['email']}: {resp.json().get('detail')}")
        else:
            print(f"  [ERROR] {user['email']}: {resp.status_code} {resp.text}")
            continue
        token = await _sign_in(client, user["email"], DEMO_PASSWORD)
        if token:
            tokens[user["role"]] = token
    return tokens


async def seed_requests(client: httpx.AsyncClient, tokens: dict[str, str]) -> None:
    """Submit demo requests and walk them through the lifecycle."""
    print("\n--- Requests ---")
    if not {"employee", "manager", "accountant"} <= tokens.keys():
        print("  [SKIP] missing demo accounts")
        return

    created: list[dict[str, Any]] = []
    for payload in REQUESTS:
        resp = await client.post(f"{BASE_URL}/requests", data=payload, headers=_headers(tokens["employee"]))
        if resp.status_code == 201:
            created.append(resp.json())
            print(f"  [OK] Submitted {payload['purpose']} ({payload['amount']} FCFA)")
        else:
            print(f"  [ERROR] Submitting {payload['purpose']}: {resp.status_code} {resp.text}")

    if len(created) < len(REQUESTS):
        return

    decisions = [
        (created[0]["id"], {"status": "approved", "manager_comment": "OK"}, "manager"),
        (created[1]["id"], {"status": "approved"}, "manager"),
        (created[2]["id"], {"status": "rejected", "rejection_reason": "Not a business expense"}, "manager"),
        (created[0]["id"], {"status": "disbursed"}, "accountant"),
    ]
    for request_id, body, role in decisions:
        resp = await client.patch(
            f"{BASE_URL}/requests/{request_id}/status", json=body, headers=_headers(tokens[role])
        )
        if resp.status_code == 200:
            print(f"  [OK] {role} set {request_id} -> {body['status']}")
        else:
            print(f"  [ERROR] {role} setting {body['status']}: {resp.status_code} {resp.text}")


async def main() -> None:
    print("=" * 60)
    print("  Cashbook Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            sys.exit(1)

        admin_token = await _sign_in(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        if admin_token is None:
            print("Set BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD on the API and here.")
            sys.exit(1)

        tokens = await seed_users(client, admin_token)
        await seed_requests(client, tokens)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
