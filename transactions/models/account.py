"""
Account model: a bank account holding a balance.
"""

from sqlalchemy import Column, Integer

from transactions.models.base import Base, IdentityMixin, ModelMixin


class Account(Base, IdentityMixin, ModelMixin):
    """
    Bank account.

    Attributes:
        id: Generated primary key
        balance: Current balance in whole currency units
    """

    __tablename__ = "account"

    balance = Column(
        Integer,
        nullable=False,
        doc="Current balance"
    )
