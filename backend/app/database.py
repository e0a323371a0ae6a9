"""
MessageWall Backend - Database Session Management
===================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   The engine and session factory are built once in the application
       lifespan and stored on `app.state`; each request gets its own session
       through `get_db_session`, which commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.

Why not a module-level engine:
    The engine depends on DATABASE_URL, which is validated at startup. Building
    it inside the lifespan keeps imports side-effect free and lets tests hand
    the app an in-memory SQLite engine without patching globals.

Connection Pooling Strategy (server databases only):
    pool_size / max_overflow from settings, pool_pre_ping to catch stale
    connections, pool_recycle=3600. SQLite uses SQLAlchemy's default pool.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by Alembic for migrations and by
    the test suite for `create_all`.
    """
    pass


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Builds the async engine; pool options are skipped for SQLite URLs."""
    options = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: ORM objects stay readable after the request commits
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory on app.state
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back (a failed like write leaves the store unchanged)
        5. Always: closes the session (returns connection to pool)
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
