"""
Transaction isolation levels and per-dialect resolution.

Values are the SQL names SQLAlchemy accepts for the ``isolation_level``
execution option, so a member can be handed straight to the driver.
"""

import logging
from enum import Enum
from typing import Dict, Tuple

from transactions.core.errors import UnsupportedIsolationLevelError

logger = logging.getLogger(__name__)


class IsolationLevel(str, Enum):
    """
    ANSI transaction isolation levels, weakest first.

    READ_UNCOMMITTED: dirty reads possible.
    READ_COMMITTED: only committed data is visible; repeated reads of a
        row may differ within one transaction.
    REPEATABLE_READ: repeated reads of a row see the same values; write
        skew may still happen depending on the store.
    SERIALIZABLE: concurrent transactions behave as if run one after
        another; the store may abort one with a serialization failure.
    """

    READ_UNCOMMITTED = "READ UNCOMMITTED"
    READ_COMMITTED = "READ COMMITTED"
    REPEATABLE_READ = "REPEATABLE READ"
    SERIALIZABLE = "SERIALIZABLE"

    @classmethod
    def _missing_(cls, value):
        # Accept "read_committed", "Read Committed", "REPEATABLE-READ", ...
        if isinstance(value, str):
            normalized = value.strip().upper().replace("_", " ").replace("-", " ")
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def strength(self) -> int:
        """Position in the weakest-to-strongest ordering."""
        return _ORDER.index(self)

    def __str__(self) -> str:
        return self.value


_ORDER = (
    IsolationLevel.READ_UNCOMMITTED,
    IsolationLevel.READ_COMMITTED,
    IsolationLevel.REPEATABLE_READ,
    IsolationLevel.SERIALIZABLE,
)

# Levels each dialect can actually enforce. Unlisted dialects are assumed
# to support all four.
DIALECT_ISOLATION_LEVELS: Dict[str, Tuple[IsolationLevel, ...]] = {
    "postgresql": _ORDER,
    "sqlite": (IsolationLevel.READ_UNCOMMITTED, IsolationLevel.SERIALIZABLE),
}


def supported_isolation_levels(dialect_name: str) -> Tuple[IsolationLevel, ...]:
    """Return the isolation levels a dialect enforces, weakest first."""
    return DIALECT_ISOLATION_LEVELS.get(dialect_name, _ORDER)


def resolve_isolation_level(
    dialect_name: str,
    requested: IsolationLevel
) -> IsolationLevel:
    """
    Map a requested isolation level onto one the dialect supports.

    The requested level is used as-is when the dialect supports it.
    Otherwise the weakest supported level that is at least as strong is
    returned. A level is never lowered.

    Args:
        dialect_name: SQLAlchemy dialect name ("sqlite", "postgresql", ...)
        requested: Isolation level asked for by the caller

    Returns:
        Isolation level to pass to the driver

    Raises:
        UnsupportedIsolationLevelError: If the dialect has no level at
            least as strong as the requested one

    Example:
        >>> resolve_isolation_level("sqlite", IsolationLevel.READ_COMMITTED)
        <IsolationLevel.SERIALIZABLE: 'SERIALIZABLE'>
    """
    requested = IsolationLevel(requested)
    supported = supported_isolation_levels(dialect_name)

    if requested in supported:
        return requested

    for candidate in supported:
        if candidate.strength >= requested.strength:
            logger.debug(
                f"{dialect_name} does not support {requested}; using {candidate}",
                extra={"isolation_level": candidate.value},
            )
            return candidate

    raise UnsupportedIsolationLevelError(dialect_name, requested.value)
