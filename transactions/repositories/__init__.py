"""
Repository layer for data access.

Provides data access abstractions following the Repository pattern,
isolating database access from transaction handling.
"""

from transactions.repositories.base import BaseRepository
from transactions.repositories.account import AccountRepository
from transactions.repositories.item import ItemRepository
from transactions.repositories.room import RoomRepository

__all__ = [
    "BaseRepository",
    "AccountRepository",
    "ItemRepository",
    "RoomRepository",
]
