"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- In-memory and file-backed SQLite engines with the schema created
- Session factories and services bound to those engines
"""

import os

# Set test environment variables BEFORE any imports
# This must happen first to ensure settings load with test values
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DB_LOCK_TIMEOUT_MS"] = "1000"
os.environ["DEFAULT_ISOLATION_LEVEL"] = "READ COMMITTED"
os.environ["LOG_LEVEL"] = "DEBUG"

import pytest

from transactions.core.config import Settings
from transactions.core.database import (
    close_db,
    create_session_maker,
    get_async_engine,
    init_db,
)
from transactions.services import AccountService, ItemService, RoomService


@pytest.fixture
async def engine():
    """
    Private in-memory SQLite database with all tables created.

    Yields:
        AsyncEngine (StaticPool, so every session shares the same database)
    """
    engine = get_async_engine(Settings(database_url="sqlite+aiosqlite:///:memory:"))
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the in-memory engine."""
    return create_session_maker(engine)


@pytest.fixture
async def async_session(session_factory):
    """
    Plain session for repository tests.

    The session autobegins a transaction on first use and is rolled back
    when the test ends.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def file_engine(tmp_path):
    """
    File-backed SQLite database so two transactions use two connections.

    A short busy timeout bounds how long a commit waits for readers to
    release their locks.
    """
    db_settings = Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'locking.db'}",
        db_lock_timeout_ms=500,
    )
    engine = get_async_engine(db_settings)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def file_session_factory(file_engine):
    """Session factory bound to the file-backed engine."""
    return create_session_maker(file_engine)


@pytest.fixture
def account_service(session_factory):
    return AccountService(session_factory)


@pytest.fixture
def item_service(session_factory):
    return ItemService(session_factory)


@pytest.fixture
def room_service(session_factory):
    return RoomService(session_factory)
