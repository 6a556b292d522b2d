"""
Item model: stock of one product in a store.
"""

from sqlalchemy import BigInteger, Column, Integer, Index

from transactions.models.base import Base, IdentityMixin, ModelMixin


class Item(Base, IdentityMixin, ModelMixin):
    """
    Stocked item.

    Attributes:
        id: Generated primary key
        store_id: Store the item is stocked in
        quantity: Units available; may go negative under weak isolation
    """

    __tablename__ = "item"

    store_id = Column(
        BigInteger,
        nullable=True,
        doc="Store holding the item"
    )

    quantity = Column(
        Integer,
        nullable=False,
        doc="Units in stock"
    )

    __table_args__ = (
        Index("idx_item_store", "store_id"),
    )
