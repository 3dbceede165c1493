"""
Pytest configuration and fixtures for backend tests.

This module provides the core testing infrastructure including:
- Test database setup and teardown (one SQLite file per test)
- Session and session-factory fixtures for database access
- A grant store bound to the test database
- Test client for API integration tests
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from scribe.api.deps import get_grant_store
from scribe.core.rate_limit import limiter
from scribe.db import base  # noqa: F401  # ensure models are imported for metadata
from scribe.db.session import get_session
from scribe.main import app
from scribe.services.grants import SqlGrantStore


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(scope="function")
async def engine(tmp_path):
    """Create a throwaway database engine with all tables created."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'scribe_test.db'}", echo=False)
    event.listen(test_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    """Session factory bound to the test engine (what the grant store uses)."""
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture(scope="function")
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database session for each test.

    Each test gets its own database file, so no truncation is needed.
    """
    async with session_factory() as test_session:
        yield test_session


@pytest.fixture
def grant_store(session_factory) -> SqlGrantStore:
    return SqlGrantStore(session_factory, timeout=5.0)


@pytest.fixture
async def client(session: AsyncSession, grant_store: SqlGrantStore) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing API endpoints.

    This fixture:
    - Overrides the database session dependency to use the test session
    - Points the grant store at the test database
    - Provides an AsyncClient configured with the FastAPI app

    Usage:
        async def test_endpoint(client: AsyncClient):
            response = await client.get("/api/v1/blogs/")
            assert response.status_code == 200
    """

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_grant_store] = lambda: grant_store

    # Disable rate limiting in tests
    limiter.enabled = False

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
