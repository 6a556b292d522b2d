"""Item repository."""

from typing import List

from sqlalchemy import select

from transactions.models.item import Item
from transactions.repositories.base import BaseRepository


class ItemRepository(BaseRepository[Item]):
    """Data access for stocked items."""

    model = Item

    async def find_in_stock(self, store_id: int) -> List[Item]:
        """
        Items of a store with a positive quantity.

        Args:
            store_id: Store to look in

        Returns:
            Items ordered by id
        """
        stmt = (
            select(Item)
            .where(Item.store_id == store_id, Item.quantity > 0)
            .order_by(Item.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
