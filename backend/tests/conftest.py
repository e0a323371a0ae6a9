"""
MessageWall Backend - Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests (no real DB)
    ├── sample_message_data: field values matching the Message model
    ├── engine: in-memory aiosqlite engine with the schema created
    ├── session_factory: async_sessionmaker bound to that engine
    ├── make_client: builds an HTTPX AsyncClient for a given like policy/strategy
    └── test_client: make_client with the default configuration
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, create_session_factory
from app.main import create_app
from app.models.message import Message  # noqa: F401
from app.services.like_policy import get_like_policy
from app.services.message_service import MessageService


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one.return_value = 3
        result = await service.like_message(mock_db_session, message_id, "add")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_message_data():
    return {
        "id": uuid4(),
        "content": "hello wall",
        "image_url": None,
        "likes": 0,
        "created_at": datetime.now(timezone.utc),
    }


@pytest_asyncio.fixture
async def engine():
    """
    In-memory SQLite shared by every session of one test.

    StaticPool keeps a single connection alive; without it each connection
    would see its own empty in-memory database.
    """
    db_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def make_client(engine, session_factory):
    """
    Factory fixture: returns an async function building a client for one
    like policy and update strategy.

    The lifespan is not run by ASGITransport, so app.state is filled here
    the same way the lifespan would fill it.
    """
    clients = []

    async def _make(policy: str = "directional", strategy: str = "read_write") -> AsyncClient:
        app = create_app()
        app.state.engine = engine
        app.state.session_factory = session_factory
        app.state.message_service = MessageService(
            policy=get_like_policy(policy),
            strategy=strategy,
        )
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest_asyncio.fixture
async def test_client(make_client):
    """HTTPX AsyncClient for the default configuration (directional, read_write)."""
    return await make_client()
