"""
Tests for engine construction and schema helpers.
"""

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from transactions.core.config import Settings
from transactions.core.database import (
    close_db,
    drop_db,
    get_async_engine,
    get_connect_args,
    init_db,
    is_memory_database,
)
from transactions.core.isolation import IsolationLevel
from transactions.core.transaction import transaction_scope
from transactions.repositories import AccountRepository


class TestConnectArgs:
    """Lock timeouts are handed to the driver."""

    def test_sqlite_busy_timeout_in_seconds(self):
        args = get_connect_args("sqlite+aiosqlite:///./data/t.db", 2500)

        assert args == {"check_same_thread": False, "timeout": 2.5}

    def test_asyncpg_lock_timeout_server_setting(self):
        args = get_connect_args("postgresql+asyncpg://u:p@localhost/db", 750)

        assert args == {"server_settings": {"lock_timeout": "750"}}


class TestIsMemoryDatabase:

    @pytest.mark.parametrize("url,expected", [
        ("sqlite+aiosqlite:///:memory:", True),
        ("sqlite+aiosqlite://", True),
        ("sqlite+aiosqlite:///./data/transactions.db", False),
        ("postgresql+asyncpg://u:p@localhost/db", False),
    ])
    def test_detection(self, url, expected):
        assert is_memory_database(url) is expected


class TestGetAsyncEngine:

    @pytest.mark.asyncio
    async def test_memory_database_uses_static_pool(self):
        engine = get_async_engine(Settings(database_url="sqlite+aiosqlite:///:memory:"))
        try:
            assert isinstance(engine.pool, StaticPool)
            assert engine.dialect.name == "sqlite"
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_postgres_pool_sizing(self):
        """Engine creation does not connect, so no server is needed."""
        pytest.importorskip("asyncpg")
        engine = get_async_engine(Settings(
            database_url="postgresql+asyncpg://u:p@localhost:5432/db",
            db_pool_size=7,
            db_max_overflow=2,
        ))
        try:
            assert engine.pool.size() == 7
            assert engine.dialect.name == "postgresql"
        finally:
            await engine.dispose()


class TestSchemaHelpers:

    @pytest.mark.asyncio
    async def test_init_and_drop(self, tmp_path):
        """
        Test schema creation and teardown.

        Arrange: Empty file database
        Act: init_db, then drop_db
        Assert: The three tables exist after init and are gone after drop
        """
        # Arrange
        engine = get_async_engine(Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 's.db'}"))

        async def table_names():
            async with engine.connect() as conn:
                return await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))

        try:
            # Act
            await init_db(engine)
            created = await table_names()
            await drop_db(engine)
            dropped = await table_names()
        finally:
            await close_db(engine)

        # Assert
        assert {"account", "item", "room"} <= created
        assert dropped == set()

    @pytest.mark.asyncio
    async def test_init_is_idempotent(self, engine):
        await init_db(engine)
        await init_db(engine)


class TestSqliteTransactions:
    """SQLite transactions begin before the first read, not the first write."""

    @pytest.mark.asyncio
    async def test_read_only_transaction_is_open_on_the_driver(self, session_factory):
        async with transaction_scope(session_factory, IsolationLevel.SERIALIZABLE) as session:
            await AccountRepository(session).count()
            connection = await session.connection()
            raw = await connection.get_raw_connection()

            assert raw.driver_connection.in_transaction
