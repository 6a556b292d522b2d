"""
Room model: a bookable hotel room.
"""

from sqlalchemy import Boolean, Column, String

from transactions.models.base import Base, IdentityMixin, ModelMixin


class Room(Base, IdentityMixin, ModelMixin):
    """
    Hotel room.

    Attributes:
        id: Generated primary key
        is_available: Whether the room can be booked
        guest_name: Guest currently holding the room, if any
    """

    __tablename__ = "room"

    is_available = Column(
        Boolean,
        nullable=False,
        default=True,
        doc="Room can be booked"
    )

    guest_name = Column(
        String(255),
        nullable=True,
        doc="Name of the guest occupying the room"
    )
