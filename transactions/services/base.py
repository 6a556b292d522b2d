"""
Transactional service base.

Each save runs in its own transaction at an isolation level the caller
picks. The named variants differ only in that level; they let a caller
choose the consistency/throughput tradeoff per use case:

- READ COMMITTED: highest concurrency, no protection against
  non-repeatable reads.
- REPEATABLE READ: rows read twice in the transaction look the same.
- SERIALIZABLE: concurrent transactions behave as if run one at a time;
  the store may abort one with a serialization failure that the caller
  has to retry (see transactions.core.retry).

Failures are never retried or downgraded here. Whatever the store raises
reaches the caller unchanged after the transaction is rolled back.
"""

import logging
from typing import Any, Generic, Optional, Type

from sqlalchemy.ext.asyncio import async_sessionmaker

from transactions.core.config import settings
from transactions.core.isolation import IsolationLevel
from transactions.core.logging_config import log_with_context
from transactions.core.transaction import transaction_scope
from transactions.repositories.base import BaseRepository, ModelT

logger = logging.getLogger(__name__)


class TransactionalService(Generic[ModelT]):
    """
    Service wrapping repository calls in transactions.

    Stateless apart from the session factory, so one instance can be
    shared by any number of concurrent tasks.

    Attributes:
        repository_class: Repository type for the entity (set by subclasses)
        session_factory: Session factory bound to the connection pool
    """

    repository_class: Type[BaseRepository[ModelT]]

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        """
        Initialize service.

        Args:
            session_factory: Session factory to use (defaults to the
                application-wide one in transactions.core.database)
        """
        if session_factory is None:
            from transactions.core.database import async_session_maker
            session_factory = async_session_maker
        self.session_factory = session_factory

    @property
    def entity_name(self) -> str:
        return self.repository_class.model.__name__

    async def save(self, entity: ModelT, isolation_level: IsolationLevel) -> ModelT:
        """
        Save an entity in a new transaction at the given isolation level.

        Args:
            entity: Entity to insert (no id) or update (id set)
            isolation_level: Isolation level of the wrapping transaction

        Returns:
            Persisted entity with its id populated

        Raises:
            IntegrityError: Store rejected the values; rolled back
            DBAPIError: Serialization conflict, lock timeout or any other
                store failure; rolled back
            EntityNotFoundError: Update of an id that has no row; rolled back
        """
        async with transaction_scope(
            self.session_factory, isolation_level, mapper=self.repository_class.model
        ) as session:
            saved = await self.repository_class(session).save(entity)

        log_with_context(
            logger,
            "debug",
            f"{self.entity_name} saved",
            entity=self.entity_name,
            entity_id=saved.id,
            isolation_level=IsolationLevel(isolation_level).value,
        )
        return saved

    async def save_read_committed(self, entity: ModelT) -> ModelT:
        """Save in a READ COMMITTED transaction."""
        return await self.save(entity, IsolationLevel.READ_COMMITTED)

    async def save_repeatable_read(self, entity: ModelT) -> ModelT:
        """Save in a REPEATABLE READ transaction."""
        return await self.save(entity, IsolationLevel.REPEATABLE_READ)

    async def save_serializable(self, entity: ModelT) -> ModelT:
        """Save in a SERIALIZABLE transaction."""
        return await self.save(entity, IsolationLevel.SERIALIZABLE)

    async def find_by_id(
        self,
        entity_id: Any,
        isolation_level: Optional[IsolationLevel] = None
    ) -> Optional[ModelT]:
        """
        Look up an entity in its own read transaction.

        Args:
            entity_id: Primary key value
            isolation_level: Defaults to settings.default_isolation_level

        Returns:
            Entity if found, None otherwise (never raises for a missing id)
        """
        level = isolation_level or settings.default_isolation_level
        async with transaction_scope(
            self.session_factory, level, mapper=self.repository_class.model
        ) as session:
            return await self.repository_class(session).find_by_id(entity_id)
