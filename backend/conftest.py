from __future__ import annotations

import os
import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET"] = "test-secret"
os.environ["SMTP_HOST"] = ""
os.environ["OTP_ALLOW_SIGNUP"] = "false"

from core.auth import current_active_user  # noqa: E402
from db.database import Base, get_async_session, AdminAccount  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture()
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest.fixture()
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture()
def admin_account():
    return AdminAccount(
        id=uuid.uuid4(),
        email="admin@example.com",
        hashed_password="not-used",
        is_active=True,
        is_superuser=True,
        is_verified=True,
    )


def _override_session(session_maker):
    async def _get_session():
        async with session_maker() as session:
            yield session

    return _get_session


@pytest.fixture()
async def anon_client(session_maker):
    """Client with the test store wired in and no signed-in administrator."""
    app.dependency_overrides[get_async_session] = _override_session(session_maker)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
async def client(session_maker, admin_account):
    """Client signed in as an active administrator."""
    app.dependency_overrides[get_async_session] = _override_session(session_maker)
    app.dependency_overrides[current_active_user] = lambda: admin_account
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
