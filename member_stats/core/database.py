"""
Database configuration and session management.

Provides async database sessions and metadata for ORM models.

DATABASE_URL is read from member_stats.core.config (single resolution path).
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
import logging

from member_stats.core.config import DATABASE_URL, DB_MAX_OVERFLOW, DB_POOL_SIZE

logger = logging.getLogger(__name__)

# Create declarative base for ORM models
Base = declarative_base()

# Convert to async URL if needed
if DATABASE_URL.startswith('postgresql://'):
    ASYNC_DATABASE_URL = DATABASE_URL.replace('postgresql://', 'postgresql+asyncpg://')
else:
    ASYNC_DATABASE_URL = DATABASE_URL

if ASYNC_DATABASE_URL.startswith('sqlite'):
    engine = create_async_engine(ASYNC_DATABASE_URL, echo=False)
else:
    engine = create_async_engine(
        ASYNC_DATABASE_URL,
        echo=False,
        pool_pre_ping=True,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
    )

# Create async session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Yields:
        AsyncSession: Database session
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block of writes as one transaction.

    Commits when the block exits cleanly; otherwise rolls back every
    pending change and re-raises.
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise


async def init_database(bind=None):
    """
    Initialize database - create tables if they don't exist.

    Note: In production, use migrations instead.
    This is mainly for development/testing.
    """
    # Import all ORM models so they're registered with Base.
    import member_stats.api.models  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized")
