"""Transactional services, one per entity type."""

from transactions.services.base import TransactionalService
from transactions.services.account import AccountService
from transactions.services.item import ItemService
from transactions.services.room import RoomService

__all__ = [
    "TransactionalService",
    "AccountService",
    "ItemService",
    "RoomService",
]
