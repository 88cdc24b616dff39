"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  The production models use only portable
column types, so the real ``Base`` metadata is created directly.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.api.app import create_app
from src.api.dependencies import get_db
from src.api.middleware import limiter
from src.domain.entities import Location, Waypoint
from src.domain.enums import WaypointType
from src.infrastructure.database import Base, session_scope


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)

BASE_URL = "http://test/api/v1"


async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
    async with session_scope(TestSessionFactory) as session:
        yield session


# ── Waypoint builders ─────────────────────────────────────────────────


def pickup(trip_id: str) -> Waypoint:
    return Waypoint(trip_id, WaypointType.PICKUP.value, Location(37.42, -122.08))


def stop(trip_id: str) -> Waypoint:
    return Waypoint(
        trip_id, WaypointType.INTERMEDIATE_DESTINATION.value, Location(37.40, -122.10)
    )


def drop_off(trip_id: str) -> Waypoint:
    return Waypoint(trip_id, WaypointType.DROP_OFF.value, Location(37.39, -122.07))


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, then drop everything."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def app(db_session):
    application = create_app()
    application.dependency_overrides[get_db] = _get_test_db
    limiter.enabled = False
    yield application
    limiter.enabled = True


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        yield ac
