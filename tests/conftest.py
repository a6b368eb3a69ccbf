"""
Blog API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── database_url: SQLite file in the test's tmp_path
    ├── database: connected Database on that file
    ├── test_client: HTTPX AsyncClient wired to create_app(database)
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    └── blog_payload: a valid POST /blogs body
"""

import os

# Override settings for testing BEFORE any blogapi imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_blogs.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["REQUEST_TIMEOUT"] = "5"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from blogapi.database import Database  # noqa: E402
from blogapi.main import create_app  # noqa: E402


@pytest.fixture
def database_url(tmp_path):
    """A fresh SQLite database file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'blogs.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    """Connected Database with an empty `blogs` table."""
    db = Database(database_url)
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def app(database):
    return create_app(database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Uses ASGITransport to route requests straight into the app, no server.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/blogs")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.get.return_value = blog
        result = await service.get_blog(mock_db_session, str(blog.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def blog_payload():
    """A complete, valid creation body."""
    return {
        "title": "Ten Things About Tide Pools",
        "author": {"firstName": "Jane", "lastName": "Doe"},
        "content": "Anemones close when the water leaves.",
    }
