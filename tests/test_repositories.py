"""
Unit tests for the entity repositories.

Tests CRUD operations against an in-memory database with the AAA pattern
(Arrange, Act, Assert).
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from transactions.core.errors import EntityNotFoundError
from transactions.models import Account, Item, Room
from transactions.repositories import AccountRepository, ItemRepository, RoomRepository


class TestSave:
    """Test suite for the insert-or-update save operation."""

    @pytest.mark.asyncio
    async def test_save_without_id_inserts_and_assigns_id(self, async_session: AsyncSession):
        """
        Test saving a new entity assigns a generated id.

        Arrange: Transient account without id
        Act: Save it
        Assert: Id assigned, same instance returned, row readable
        """
        # Arrange
        repo = AccountRepository(async_session)
        account = Account(balance=500)

        # Act
        saved = await repo.save(account)

        # Assert
        assert saved is account
        assert saved.id is not None
        found = await repo.find_by_id(saved.id)
        assert found.balance == 500

    @pytest.mark.asyncio
    async def test_save_assigns_unused_ids(self, async_session: AsyncSession):
        """Every insert gets an id no other row has."""
        repo = AccountRepository(async_session)

        ids = [(await repo.save(Account(balance=n))).id for n in range(5)]

        assert len(set(ids)) == 5

    @pytest.mark.asyncio
    async def test_save_with_id_updates_in_place(self, async_session: AsyncSession):
        """
        Test saving an entity with an existing id updates that row.

        Arrange: Persist an item, then build a detached copy with new values
        Act: Save the copy
        Assert: Row count unchanged, stored values replaced
        """
        # Arrange
        repo = ItemRepository(async_session)
        original = await repo.save(Item(store_id=1, quantity=3))
        async_session.expunge(original)

        # Act
        updated = await repo.save(Item(id=original.id, store_id=2, quantity=7))

        # Assert
        assert updated.id == original.id
        assert await repo.count() == 1
        found = await repo.find_by_id(original.id)
        assert found.store_id == 2
        assert found.quantity == 7

    @pytest.mark.asyncio
    async def test_save_persistent_instance_flushes_changes(self, async_session: AsyncSession):
        """Mutating a loaded entity and saving it writes the new values."""
        repo = RoomRepository(async_session)
        room = await repo.save(Room(is_available=True))

        room.is_available = False
        room.guest_name = "Bob"
        saved = await repo.save(room)

        assert saved is room
        assert await repo.find_available() == []

    @pytest.mark.asyncio
    async def test_save_unknown_id_raises_not_found(self, async_session: AsyncSession):
        """Updating an id that has no row does not insert a new one."""
        repo = AccountRepository(async_session)

        with pytest.raises(EntityNotFoundError) as exc_info:
            await repo.save(Account(id=999, balance=10))

        assert exc_info.value.entity_name == "Account"
        assert exc_info.value.entity_id == 999
        assert await repo.count() == 0

    @pytest.mark.asyncio
    async def test_save_null_in_required_column_raises_integrity_error(
        self,
        async_session: AsyncSession
    ):
        """The store's NOT NULL constraint surfaces unchanged."""
        repo = AccountRepository(async_session)

        with pytest.raises(IntegrityError):
            await repo.save(Account(balance=None))


class TestFind:
    """Test suite for lookups."""

    @pytest.mark.asyncio
    async def test_find_by_id_missing_returns_none(self, async_session: AsyncSession):
        """A never-assigned id yields None rather than an error."""
        repo = RoomRepository(async_session)

        assert await repo.find_by_id(12345) is None

    @pytest.mark.asyncio
    async def test_find_by_id_round_trip(self, async_session: AsyncSession):
        """A saved room reads back with the same values."""
        repo = RoomRepository(async_session)
        room = await repo.save(Room(is_available=True, guest_name=None))

        found = await repo.find_by_id(room.id)

        assert found.to_dict() == {"id": room.id, "is_available": True, "guest_name": None}

    @pytest.mark.asyncio
    async def test_find_all_ordered_by_id(self, async_session: AsyncSession):
        repo = AccountRepository(async_session)
        first = await repo.save(Account(balance=1))
        second = await repo.save(Account(balance=2))

        accounts = await repo.find_all()

        assert [a.id for a in accounts] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_exists_by_id(self, async_session: AsyncSession):
        repo = AccountRepository(async_session)
        account = await repo.save(Account(balance=1))

        assert await repo.exists_by_id(account.id) is True
        assert await repo.exists_by_id(account.id + 100) is False

    @pytest.mark.asyncio
    async def test_find_in_stock_filters_store_and_quantity(self, async_session: AsyncSession):
        """Only items of the store with a positive quantity are returned."""
        repo = ItemRepository(async_session)
        in_stock = await repo.save(Item(store_id=1, quantity=2))
        await repo.save(Item(store_id=1, quantity=0))
        await repo.save(Item(store_id=2, quantity=5))

        items = await repo.find_in_stock(store_id=1)

        assert [item.id for item in items] == [in_stock.id]


class TestCountAndDelete:
    """Test suite for count and delete_by_id."""

    @pytest.mark.asyncio
    async def test_count_empty(self, async_session: AsyncSession):
        assert await ItemRepository(async_session).count() == 0

    @pytest.mark.asyncio
    async def test_delete_by_id(self, async_session: AsyncSession):
        """
        Test deleting an existing row.

        Arrange: Persist two accounts
        Act: Delete one
        Assert: Returns True, the other account remains
        """
        # Arrange
        repo = AccountRepository(async_session)
        doomed = await repo.save(Account(balance=1))
        kept = await repo.save(Account(balance=2))
        doomed_id = doomed.id

        # Act
        deleted = await repo.delete_by_id(doomed_id)

        # Assert
        assert deleted is True
        assert await repo.count() == 1
        assert await repo.exists_by_id(kept.id) is True

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false(self, async_session: AsyncSession):
        assert await AccountRepository(async_session).delete_by_id(42) is False
