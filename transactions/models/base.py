"""
Base models and mixins for SQLAlchemy ORM.

Provides the declarative base, a mixin for generated integer identities,
and common utilities for all database models.
"""

from typing import Any

from sqlalchemy import BigInteger, Column, Integer
from sqlalchemy.orm import declarative_base, validates


# SQLAlchemy declarative base for all ORM models
Base = declarative_base()

# BIGINT everywhere except SQLite, where only INTEGER PRIMARY KEY autoincrements
IdentityType = BigInteger().with_variant(Integer(), "sqlite")


class IdentityMixin:
    """
    Mixin that adds a store-generated integer primary key.

    The id is None until the entity is first persisted. Once assigned it
    cannot be changed on the instance.

    Attributes:
        id: Autoincrement primary key
    """

    id = Column(
        IdentityType,
        primary_key=True,
        autoincrement=True,
        doc="Generated primary key"
    )

    @validates("id")
    def _validate_id(self, key: str, value: Any) -> Any:
        current = self.__dict__.get(key)
        if current is not None and value != current:
            raise ValueError(
                f"{self.__class__.__name__}.id is immutable once assigned "
                f"(current={current!r}, new={value!r})"
            )
        return value


class ModelMixin:
    """
    Mixin providing common model utilities.

    Adds helper methods for serialization and representation.
    """

    def to_dict(self) -> dict[str, Any]:
        """
        Convert model instance to dictionary.

        Returns:
            Dictionary with all column values
        """
        return {
            column.name: getattr(self, column.key)
            for column in self.__table__.columns
        }

    def __repr__(self) -> str:
        attrs = ", ".join(
            f"{key}={value!r}" for key, value in self.to_dict().items()
        )
        return f"{self.__class__.__name__}({attrs})"
