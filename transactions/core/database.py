"""
Database configuration and session management.

Provides SQLAlchemy async engine setup, the session factory shared by all
services, and schema creation/teardown helpers.
"""

import logging
from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from transactions.core.config import Settings, settings
from transactions.models.base import Base

logger = logging.getLogger(__name__)


def is_memory_database(database_url: str) -> bool:
    """True for SQLite URLs that point at a private in-memory database."""
    return database_url.startswith("sqlite") and (
        ":memory:" in database_url or database_url.rstrip("/").endswith(":")
    )


def get_connect_args(database_url: str, lock_timeout_ms: int) -> dict:
    """
    Get driver-specific connection arguments.

    The lock timeout bounds how long a statement waits on a lock held by a
    concurrent transaction, so writers fail instead of hanging:
    - SQLite: busy ``timeout`` in seconds
    - PostgreSQL (asyncpg): ``lock_timeout`` server setting in milliseconds

    Args:
        database_url: Database connection URL
        lock_timeout_ms: Lock wait limit in milliseconds

    Returns:
        Connection arguments dict
    """
    if database_url.startswith("sqlite"):
        return {
            "check_same_thread": False,
            "timeout": lock_timeout_ms / 1000,
        }
    if database_url.startswith("postgresql+asyncpg"):
        return {"server_settings": {"lock_timeout": str(lock_timeout_ms)}}
    return {}


def get_async_engine(db_settings: Optional[Settings] = None) -> AsyncEngine:
    """
    Create and configure the async SQLAlchemy engine.

    For SQLite:
    - In-memory databases use StaticPool so every session sees the same data
    - File databases use the dialect's default pool
    - Transactions start with an explicit BEGIN, so reads take SHARED locks
      and a stale writer fails with "database is locked"
    For PostgreSQL:
    - Pool size, overflow and checkout timeout come from settings

    Args:
        db_settings: Settings to build from (defaults to the global settings)

    Returns:
        Configured AsyncEngine instance

    Note:
        The global engine below is created once at import and reused.
        Connections are only opened on first use.
    """
    db_settings = db_settings or settings
    database_url = db_settings.database_url

    engine_kwargs = {
        "echo": db_settings.database_echo,
        "pool_pre_ping": db_settings.db_pool_pre_ping,
        "connect_args": get_connect_args(database_url, db_settings.db_lock_timeout_ms),
    }

    if is_memory_database(database_url):
        engine_kwargs["poolclass"] = StaticPool
    elif not db_settings.is_sqlite:
        engine_kwargs.update(
            pool_size=db_settings.db_pool_size,
            max_overflow=db_settings.db_max_overflow,
            pool_timeout=db_settings.db_pool_timeout,
        )

    engine = create_async_engine(database_url, **engine_kwargs)

    # pysqlite only emits BEGIN ahead of DML; SELECTs in a transaction would
    # otherwise run in autocommit and hold no lock.
    if db_settings.is_sqlite:
        @event.listens_for(engine.sync_engine, "connect")
        def _disable_driver_transactions(dbapi_connection, connection_record):  # noqa: ANN001
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _emit_begin(conn):  # noqa: ANN001
            conn.exec_driver_sql("BEGIN")

    return engine


def create_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """
    Build a session factory for the given engine.

    Sessions keep attribute values after commit so saved entities can be
    read by the caller once the transaction is over.
    """
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
        autoflush=False,
    )


# Global async engine instance
# Created once at import; the pool opens connections lazily
engine = get_async_engine()

# Async session factory
# Services hold a reference to this (and through it, to the pool)
async_session_maker = create_session_maker(engine)


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """
    Create any missing tables (account, item, room).

    Args:
        bind: Engine to use (defaults to the global engine)

    Example:
        await init_db()
    """
    # Import models to ensure metadata is populated before create_all()
    from transactions import models  # noqa: F401

    bind = bind or engine
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(
        "Database initialized",
        extra={"tables": sorted(Base.metadata.tables)},
    )


async def drop_db(bind: Optional[AsyncEngine] = None) -> None:
    """Drop every table known to the metadata."""
    from transactions import models  # noqa: F401

    bind = bind or engine
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db(bind: Optional[AsyncEngine] = None) -> None:
    """
    Dispose of the connection pool.

    Should be called at shutdown to cleanly close all database connections.
    """
    await (bind or engine).dispose()
