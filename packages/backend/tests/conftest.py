"""Test fixtures: a fresh database per test, HTTP clients on top of it.

Each test gets its own engine with all tables created from the ORM
metadata. By default that is an in-memory SQLite database (aiosqlite);
set INKPOT_TEST_DATABASE_URL to run the same suite against Postgres, in
which case the tables are dropped again after each test.

Two clients:
- `client` overrides get_current_user with a fixed identity, so blog
  routes work without signing in first.
- `unauthenticated_client` leaves the real auth pipeline in place, for
  tests that exercise tokens end to end.
"""

import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from inkpot.config import settings
from inkpot.db.engine import get_db
from inkpot.db.models import Base, User
from inkpot.main import app

TEST_DB_URL = os.environ.get("INKPOT_TEST_DATABASE_URL", "sqlite+aiosqlite://")

FIXED_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """bcrypt at rounds=12 costs ~100ms a hash; 4 is plenty for tests."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


def _engine():
    if TEST_DB_URL.startswith("sqlite"):
        return create_async_engine(
            TEST_DB_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(TEST_DB_URL)


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a freshly created schema."""
    engine = _engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        if not TEST_DB_URL.startswith("sqlite"):
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture()
async def fixed_user(db_session):
    """The user behind the `client` fixture's identity."""
    user = User(
        id=FIXED_USER_ID,
        first_name="Fixed",
        last_name="User",
        email="fixed@example.com",
        password_hash="$2b$04$notarealhashnotarealhashnotarealhashnotarealhashnota",
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture()
async def client(db_session, fixed_user):
    """HTTP client with get_db and auth overridden for testing."""
    from inkpot.auth.dependencies import CurrentIdentity, get_current_user

    async def override_get_db():
        yield db_session

    def override_get_current_user():
        return CurrentIdentity(user_id=FIXED_USER_ID)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauthenticated_client(db_session):
    """HTTP client WITHOUT auth override, for real token flows."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def signup(unauthenticated_client):
    """Sign up a fresh user through the API; returns its token."""
    async def _signup(email=None, password="password_123", **overrides) -> str:
        body = {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
        }
        body.update(overrides)
        r = await unauthenticated_client.post("/api/v1/user/signup", json=body)
        assert r.status_code == 200, r.text
        return r.json()["token"]

    return _signup
