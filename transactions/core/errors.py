"""
Error taxonomy for transactional persistence.

Store failures (SQLAlchemy ``DBAPIError`` subclasses) are never wrapped:
they reach the caller unchanged. The classifiers below let callers tell
a constraint violation from a retryable serialization conflict or a
lock timeout without knowing which driver produced the error.
"""

from typing import Optional

from sqlalchemy.exc import DBAPIError, IntegrityError


# PostgreSQL SQLSTATE codes
SERIALIZATION_FAILURE_SQLSTATES = frozenset({
    "40001",  # serialization_failure
    "40P01",  # deadlock_detected
})
LOCK_TIMEOUT_SQLSTATES = frozenset({"55P03"})  # lock_not_available
INTEGRITY_SQLSTATE_CLASS = "23"

# SQLite reports a conflicting writer as SQLITE_BUSY
SQLITE_BUSY_MESSAGES = ("database is locked", "database table is locked")


class TransactionsError(Exception):
    """Base class for errors raised by this package itself."""


class UnsupportedIsolationLevelError(TransactionsError):
    """The store cannot provide the requested isolation level or a stronger one."""

    def __init__(self, dialect_name: str, isolation_level: str):
        self.dialect_name = dialect_name
        self.isolation_level = isolation_level
        super().__init__(
            f"Dialect '{dialect_name}' supports no isolation level "
            f"at least as strong as {isolation_level}"
        )


class EntityNotFoundError(TransactionsError):
    """An update targeted an identity that has no row."""

    def __init__(self, entity_name: str, entity_id):
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(f"{entity_name} with id {entity_id} does not exist")


def get_sqlstate(exc: BaseException) -> Optional[str]:
    """
    Extract the SQLSTATE code from a store error, if the driver exposes one.

    Looks at the DBAPI exception (``exc.orig``) and at its cause, since the
    asyncpg adapter chains the native asyncpg error there.
    """
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def is_serialization_failure(exc: BaseException) -> bool:
    """
    True if the store aborted the transaction because it conflicted with
    a concurrent one. Such failures are safe to retry from the start.
    """
    if not isinstance(exc, DBAPIError):
        return False
    if get_sqlstate(exc) in SERIALIZATION_FAILURE_SQLSTATES:
        return True
    message = str(exc.orig).lower()
    return any(busy in message for busy in SQLITE_BUSY_MESSAGES)


def is_lock_timeout(exc: BaseException) -> bool:
    """True if a statement gave up waiting for a lock held by another transaction."""
    return isinstance(exc, DBAPIError) and get_sqlstate(exc) in LOCK_TIMEOUT_SQLSTATES


def is_constraint_violation(exc: BaseException) -> bool:
    """True if the store rejected a row (NOT NULL, unique, type, ...)."""
    if isinstance(exc, IntegrityError):
        return True
    if not isinstance(exc, DBAPIError):
        return False
    sqlstate = get_sqlstate(exc)
    return sqlstate is not None and sqlstate.startswith(INTEGRITY_SQLSTATE_CLASS)
