"""Account repository."""

from transactions.models.account import Account
from transactions.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Data access for accounts."""

    model = Account
