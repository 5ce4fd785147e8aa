"""
Marketplace Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine:       In-memory SQLite engine with all tables created
    ├── db_session:      AsyncSession bound to db_engine
    ├── mock_db_session: Mock database session for failure paths
    ├── make_user:       Factory that stores a User and returns it
    ├── run_graphql:     Executes a GraphQL document against the schema
    └── test_client:     HTTPX AsyncClient wired to the FastAPI app
"""

import os

# Settings are read at import time, so the environment must be set first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from marketplace import database
from marketplace.auth import Caller
from marketplace.database import create_tables, enable_sqlite_savepoints, get_db_session
from marketplace.graphql.context import GraphQLContext
from marketplace.graphql.schema import schema
from marketplace.schemas.user import UserCreate
from marketplace.services.user_service import user_service


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    A private in-memory database per test.

    StaticPool keeps a single connection, so every session sees the same
    in-memory database. Savepoints are enabled the same way the app enables
    them for SQLite URLs.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    enable_sqlite_savepoints(engine)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_storage_failure(mock_db_session):
            mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
            ...
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()

    # begin_nested() must hand exceptions back to the caller
    savepoint = MagicMock()
    savepoint.__aenter__.return_value = savepoint
    savepoint.__aexit__.return_value = False
    session.begin_nested = MagicMock(return_value=savepoint)
    return session


# ══════════════════════════════════════════════════════════════════════════
# Data Helpers
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_user(db_session):
    """Stores a User; usernames and emails must be unique per test."""

    async def _make(username: str, **fields):
        data = UserCreate(username=username, email=f"{username}@example.com", **fields)
        return await user_service.create_user(db_session, data)

    return _make


def caller_for(user) -> Caller:
    return Caller(id=str(user.id), username=user.username)


@pytest.fixture
def run_graphql(db_session):
    """
    Executes a GraphQL document directly against the schema.

    Usage:
        result = await run_graphql("{ users { id } }", caller=caller_for(u1))
        assert result.errors is None
    """

    async def _run(
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        caller: Optional[Caller] = None,
        session=None,
    ):
        context = GraphQLContext(session=session or db_session, caller=caller)
        return await schema.execute(query, variable_values=variables, context_value=context)

    return _run


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Provides an async HTTP test client for endpoint testing.

    The app's session dependency is overridden to use the test database, and
    commits like the real one does.
    """
    from marketplace.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    # /health uses the module engine; drop its connections before this loop closes
    await database.engine.dispose()
