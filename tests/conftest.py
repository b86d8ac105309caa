"""
Shared pytest fixtures for all tests.

Provides an isolated in-memory database per test, a seeded member, an
HTTP client bound to the app and bearer token helpers.
"""

import pytest
from datetime import datetime, timezone
from httpx import AsyncClient, ASGITransport
from jose import jwt
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from member_stats.api.models import MaxRating, Member
from member_stats.core.config import settings
from member_stats.core.database import get_db, init_database


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
async def test_engine():
    """
    Create a fresh async in-memory database for each test.

    Uses StaticPool so every session shares the single in-memory connection.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_database(bind=engine)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_factory):
    """A session for arranging and inspecting data directly."""
    async with session_factory() as session:
        yield session


# =============================================================================
# DATA FIXTURES
# =============================================================================

@pytest.fixture
async def member(session_factory):
    """Member "Alice" (user id 1001) with a max rating and no color stored."""
    async with session_factory() as session:
        alice = Member(
            user_id=1001,
            handle="Alice",
            handle_lower="alice",
            email="alice@example.com",
            created_by="seed",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        alice.max_rating = MaxRating(
            rating=1650, track="DEVELOP", sub_track="CODE", created_by="seed",
        )
        session.add(alice)
        await session.commit()
    return alice


# =============================================================================
# AUTH FIXTURES
# =============================================================================

def make_token(**claims) -> str:
    """Sign a token the app will accept."""
    return jwt.encode(claims, settings.AUTH_SECRET, algorithm="HS256")


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    """Headers for a regular member token; defaults to Alice."""
    def _headers(handle: str = "alice", roles=None) -> dict:
        return bearer(make_token(**{
            "sub": f"auth0|{handle}",
            "https://topcoder-dev.com/handle": handle,
            "https://topcoder-dev.com/userId": "1001",
            "https://topcoder-dev.com/roles": roles or ["Topcoder User"],
        }))
    return _headers


@pytest.fixture
def admin_headers():
    return bearer(make_token(**{
        "sub": "auth0|admin",
        "https://topcoder-dev.com/handle": "boss",
        "https://topcoder-dev.com/roles": ["Administrator"],
    }))


@pytest.fixture
def machine_headers():
    return bearer(make_token(
        sub="stats-sync@clients",
        gty="client-credentials",
        scope="write:user_profiles read:user_profiles",
    ))


# =============================================================================
# HTTP CLIENT
# =============================================================================

@pytest.fixture
async def client(session_factory):
    """AsyncClient bound to the app, with get_db pointed at the test database."""
    from member_stats.api.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
