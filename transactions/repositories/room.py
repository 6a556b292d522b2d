"""Room repository."""

from typing import List

from sqlalchemy import select

from transactions.models.room import Room
from transactions.repositories.base import BaseRepository


class RoomRepository(BaseRepository[Room]):
    """Data access for hotel rooms."""

    model = Room

    async def find_available(self) -> List[Room]:
        """Rooms that can currently be booked, ordered by id."""
        stmt = select(Room).where(Room.is_available.is_(True)).order_by(Room.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
