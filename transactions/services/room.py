"""Room service."""

from transactions.models.room import Room
from transactions.repositories.room import RoomRepository
from transactions.services.base import TransactionalService


class RoomService(TransactionalService[Room]):
    """Saves hotel rooms at a chosen isolation level."""

    repository_class = RoomRepository
