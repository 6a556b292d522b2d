"""
SQLAlchemy ORM models.

This module exports all database models and the declarative base.
Import models from this module to ensure they're registered with SQLAlchemy.
"""

from transactions.models.base import Base, IdentityMixin, ModelMixin
from transactions.models.account import Account
from transactions.models.item import Item
from transactions.models.room import Room

__all__ = [
    # Base classes
    "Base",
    "IdentityMixin",
    "ModelMixin",
    # Models
    "Account",
    "Item",
    "Room",
]
