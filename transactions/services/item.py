"""Item service."""

from transactions.models.item import Item
from transactions.repositories.item import ItemRepository
from transactions.services.base import TransactionalService


class ItemService(TransactionalService[Item]):
    """Saves stocked items at a chosen isolation level."""

    repository_class = ItemRepository
