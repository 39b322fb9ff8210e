"""Pytest configuration and fixtures for the portal.

Environment defaults are set before portal.main is imported so the app
builds without Redis, telemetry or the notification relay. DATABASE_URL
is taken from the environment when present; DB-backed tests skip without it.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("NOTIFICATION_RELAY_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from portal.infrastructure.persistence import database  # noqa: E402
from portal.infrastructure.security.jwt import create_access_token  # noqa: E402
from portal.main import app  # noqa: E402
from tests.world import World, build_world  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def bearer():
    """Build Authorization headers for a user id (the token is not checked against the DB)."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Skips when DATABASE_URL is not set. Mark such tests with
    @pytest.mark.requires_db; run without DB via: pytest -m 'not requires_db'.
    """
    if database.get_engine() is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def world() -> World:
    """Seeded two-office portal on in-memory repositories (see tests/world.py)."""
    return build_world()
