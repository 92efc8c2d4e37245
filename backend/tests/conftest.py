"""
Notes API Backend - Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    mock_db_session:  AsyncMock standing in for AsyncSession (no database)
    sample_note_data: Attribute values of a stored note
    database:         Real Database on a temporary SQLite file, schema applied
    db_session:       Session on that database, committed at the end of the test
    test_app:         App built by create_app() with its lifespan running
    test_client:      HTTPX AsyncClient routed to test_app through ASGITransport
"""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep importing notes_api.main from touching a real database file or
# flooding the output with logs.
os.environ.setdefault("DATABASE_FILE", os.path.join(tempfile.mkdtemp(prefix="notes_test_"), "notes.db"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

from notes_api.config import Settings  # noqa: E402
from notes_api.database import Database  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
        result = await note_service.get_note(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_note_data():
    created = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
    return {
        "id": 1,
        "title": "Groceries",
        "content": "Milk, eggs, bread",
        "created_at": created,
        "updated_at": created,
    }


@pytest.fixture
def make_note(sample_note_data):
    """Factory for MagicMock notes carrying real attribute values."""

    def _make(**overrides):
        note = MagicMock()
        for key, value in {**sample_note_data, **overrides}.items():
            setattr(note, key, value)
        return note

    return _make


@pytest.fixture
def test_settings(tmp_path):
    return Settings(database_file=str(tmp_path / "notes.db"), log_level="WARNING")


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database(test_settings.database_url)
    await db.migrate()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def test_app(test_settings):
    """
    App with its lifespan running.

    ASGITransport does not send lifespan events, so the lifespan context
    is entered here directly.
    """
    from notes_api.main import create_app

    app = create_app(test_settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
