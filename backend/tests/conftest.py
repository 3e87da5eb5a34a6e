"""
Employee Manager API — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── test_settings:   Settings pointing at a throwaway SQLite file
    ├── database:        Connected Database (table created) on that file
    ├── test_app:        App built from test_settings, database connected
    ├── test_client:     HTTPX AsyncClient talking to test_app in-process
    └── sample_employee_data: Valid create/update payload

SQLite via aiosqlite stands in for PostgreSQL; both support the
COUNT(*) OVER () window used by the list query.
"""

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from employee_api.config import Settings
from employee_api.database import Database
from employee_api.main import create_app


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = employee
            result = await service.get_employee(mock_db_session, 1)
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
def test_settings(tmp_path) -> Settings:
    """Settings with a fresh SQLite database file per test."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings) -> AsyncGenerator[Database, None]:
    """A connected Database with an empty employees table."""
    db = Database(test_settings)
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_app(test_settings):
    """
    App built from test_settings.

    ASGITransport does not run the lifespan, so the database is connected
    (table created) here instead.
    """
    app = create_app(test_settings)
    await app.state.database.connect()
    yield app
    await app.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_employee_data():
    return {"name": "John Doe", "position": "Engineer", "salary": 50000}
