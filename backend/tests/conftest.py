from __future__ import annotations

import os
import uuid
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from cashbook.db import get_session
from cashbook.main import app
from cashbook.models import Profile, SQLModel
from cashbook.services.identity import InMemoryIdentityProvider, set_identity_provider
from cashbook.services.storage import InMemoryBlobStore, set_blob_store

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a fresh database per test with all tables in place."""
    _engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield the session shared by the test body and the app under test."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def identity() -> Iterator[InMemoryIdentityProvider]:
    """Install a fresh in-memory identity provider."""
    provider = InMemoryIdentityProvider()
    set_identity_provider(provider)
    yield provider
    set_identity_provider(InMemoryIdentityProvider())


@pytest.fixture
def blob_store() -> Iterator[InMemoryBlobStore]:
    """Install a fresh in-memory receipt store."""
    store = InMemoryBlobStore()
    set_blob_store(store)
    yield store
    set_blob_store(InMemoryBlobStore())


@pytest.fixture
async def async_client(
    db_session: AsyncSession,
    identity: InMemoryIdentityProvider,
    blob_store: InMemoryBlobStore,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


class Account:
    """A provisioned test identity with its bearer headers."""

    def __init__(self, user_id: uuid.UUID, email: str, token: str) -> None:
        self.id = user_id
        self.email = email
        self.headers = {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_account(
    db_session: AsyncSession,
    identity: InMemoryIdentityProvider,
) -> Callable[..., Awaitable[Account]]:
    """Factory creating an identity plus profile and returning its auth headers."""
    counter = iter(range(1, 10_000))

    async def _make(
        role: str | None = "employee",
        full_name: str | None = None,
        employee_id: int | None = None,
    ) -> Account:
        n = next(counter)
        email = f"{role or 'noprofile'}{n}@example.com"
        user = await identity.create_user(email, "secret-password", email_confirm=True)
        if role is not None:
            db_session.add(
                Profile(
                    id=user.id,
                    full_name=full_name or f"{(role or '').title()} {n}",
                    role=role,
                    employee_id=employee_id,
                )
            )
            await db_session.commit()
        return Account(user.id, email, identity.issue_token(user.id))

    return _make
