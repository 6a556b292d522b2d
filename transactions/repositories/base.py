"""
Generic repository for entity CRUD operations.

Provides the data access layer shared by every entity type: upsert by
identity, lookup by id, listing, counting and deletion.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from transactions.core.errors import EntityNotFoundError
from transactions.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Repository for one entity type.

    Every method runs inside the transaction already open on the session;
    the repository never commits or rolls back. Read consistency is
    whatever the transaction's isolation level guarantees.

    Attributes:
        model: Mapped entity class (set by subclasses)
        session: SQLAlchemy async session for database operations
    """

    model: Type[ModelT]

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session inside an open transaction
        """
        self.session = session

    async def save(self, entity: ModelT) -> ModelT:
        """
        Insert or update an entity.

        An entity without an id is inserted and receives a generated id.
        An entity with an id replaces the column values of the row with
        that id.

        Args:
            entity: Entity to persist

        Returns:
            The persisted entity with its id populated

        Raises:
            EntityNotFoundError: If the entity has an id that matches no row
            IntegrityError: If the store rejects the values (NOT NULL, ...)

        Example:
            >>> room = await repo.save(Room(is_available=True))
            >>> room.id
            1
        """
        if entity.id is None:
            self.session.add(entity)
            await self.session.flush()
            return entity

        current = await self.session.get(self.model, entity.id)
        if current is None:
            raise EntityNotFoundError(self.model.__name__, entity.id)

        if current is not entity:
            for key, value in self._column_values(entity).items():
                setattr(current, key, value)

        await self.session.flush()
        return current

    async def find_by_id(self, entity_id: Any) -> Optional[ModelT]:
        """
        Retrieve an entity by id.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists_by_id(self, entity_id: Any) -> bool:
        """Check whether a row with the given id exists."""
        stmt = select(self.model.id).where(self.model.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def find_all(self) -> List[ModelT]:
        """Get all entities ordered by id."""
        stmt = select(self.model).order_by(self.model.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        """Count stored entities."""
        stmt = select(func.count()).select_from(self.model)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def delete_by_id(self, entity_id: Any) -> bool:
        """
        Delete the row with the given id.

        Returns:
            True if a row was deleted, False if none matched
        """
        stmt = delete(self.model).where(self.model.id == entity_id)
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    def _column_values(self, entity: ModelT) -> Dict[str, Any]:
        """Column attribute values of an entity, excluding the identity."""
        return {
            attr.key: getattr(entity, attr.key)
            for attr in inspect(self.model).column_attrs
            if attr.key != "id"
        }
