"""Account service."""

from transactions.models.account import Account
from transactions.repositories.account import AccountRepository
from transactions.services.base import TransactionalService


class AccountService(TransactionalService[Account]):
    """Saves accounts at a chosen isolation level."""

    repository_class = AccountRepository
