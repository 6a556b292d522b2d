"""
Explicit transaction boundaries with a chosen isolation level.

A ``TransactionScope`` checks out a session, pins the isolation level on
its connection before any statement runs, and ends in exactly one of two
terminal states: committed on normal exit, rolled back on any exception.
The connection goes back to the pool on every exit path.

Example:
    async with transaction_scope(async_session_maker, IsolationLevel.SERIALIZABLE) as session:
        account = await AccountRepository(session).find_by_id(1)
"""

import logging
import time
from enum import Enum
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from transactions.core.isolation import IsolationLevel, resolve_isolation_level

logger = logging.getLogger(__name__)


class TransactionState(str, Enum):
    """Lifecycle of a single transaction: OPEN, then COMMITTED or ROLLED_BACK."""

    PENDING = "pending"
    OPEN = "open"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"

    @property
    def is_terminal(self) -> bool:
        return self in (TransactionState.COMMITTED, TransactionState.ROLLED_BACK)


class TransactionScope:
    """
    Async context manager around one database transaction.

    Attributes:
        session_factory: Factory producing sessions bound to the pool
        requested_level: Isolation level asked for by the caller
        isolation_level: Level actually applied (set on entry)
        state: Current TransactionState
        mapper: Mapped class used to pick the engine when the session
            factory routes classes to engines with ``binds=``
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        isolation_level: IsolationLevel,
        mapper: Optional[Any] = None
    ):
        self.session_factory = session_factory
        self.mapper = mapper
        self.requested_level = IsolationLevel(isolation_level)
        self.isolation_level: Optional[IsolationLevel] = None
        self.state = TransactionState.PENDING
        self._session: Optional[AsyncSession] = None
        self._started_at = 0.0

    async def __aenter__(self) -> AsyncSession:
        if self.state is not TransactionState.PENDING:
            raise RuntimeError("A transaction scope can only be entered once")

        session = self.session_factory()
        try:
            bind = session.get_bind(mapper=self.mapper)
            self.isolation_level = resolve_isolation_level(
                bind.dialect.name, self.requested_level
            )
            # First connection() call of the transaction: the option is applied
            # to the checked-out connection before BEGIN.
            await session.connection(
                bind_arguments={"mapper": self.mapper} if self.mapper is not None else None,
                execution_options={"isolation_level": self.isolation_level.value},
            )
        except BaseException:
            await session.close()
            raise

        self._session = session
        self._started_at = time.perf_counter()
        self.state = TransactionState.OPEN
        return session

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        session = self._session
        try:
            if exc_type is None:
                try:
                    await session.commit()
                except BaseException as commit_exc:
                    await self._rollback(session)
                    self._finish(TransactionState.ROLLED_BACK, commit_exc)
                    raise
                self._finish(TransactionState.COMMITTED)
            else:
                await self._rollback(session)
                self._finish(TransactionState.ROLLED_BACK, exc)
        finally:
            await session.close()
            self._session = None
        return False

    async def _rollback(self, session: AsyncSession) -> None:
        # Only logged: the caller gets the failure that triggered the rollback
        try:
            await session.rollback()
        except Exception:
            logger.exception("Rollback failed")

    def _finish(self, state: TransactionState, error: Optional[BaseException] = None) -> None:
        self.state = state
        extra = {
            "isolation_level": self.isolation_level.value,
            "outcome": state.value,
            "duration_ms": round((time.perf_counter() - self._started_at) * 1000, 3),
        }
        if error is None:
            logger.debug("Transaction committed", extra=extra)
        else:
            extra["error_type"] = type(error).__name__
            logger.warning(f"Transaction rolled back: {error}", extra=extra)


def transaction_scope(
    session_factory: async_sessionmaker,
    isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED,
    mapper: Optional[Any] = None
) -> TransactionScope:
    """
    Open a transaction at the given isolation level.

    Args:
        session_factory: Session factory bound to the connection pool
        isolation_level: Requested isolation level (may be raised to a
            stronger one the store supports, never lowered)
        mapper: Mapped class whose engine the transaction runs on; only
            needed when the factory has no single ``bind``

    Returns:
        TransactionScope to use with ``async with``; it yields the session
    """
    return TransactionScope(session_factory, isolation_level, mapper)
