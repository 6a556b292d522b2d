"""
Seed demo data.

Creates the schema and one account (balance 500), one item and one
available room, mirroring the starting state of the isolation scenarios.
Safe to run repeatedly: nothing is added when rows already exist.

Usage:
    python scripts/seed_demo.py
"""

import asyncio
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from transactions.core.config import settings
from transactions.core.database import async_session_maker, close_db, engine, init_db
from transactions.core.isolation import IsolationLevel
from transactions.core.logging_config import setup_logging
from transactions.core.transaction import transaction_scope
from transactions.models import Account, Item, Room
from transactions.repositories import AccountRepository
from transactions.services import AccountService, ItemService, RoomService


async def seed_demo_data():
    """
    Seed demo rows.

    Creates:
    1. Account with balance 500
    2. Item in store 1 with quantity 1
    3. Available room without a guest
    """
    if settings.is_sqlite and "memory" not in settings.database_url:
        os.makedirs("data", exist_ok=True)

    await init_db(engine)

    async with transaction_scope(async_session_maker, IsolationLevel.READ_COMMITTED) as session:
        existing = await AccountRepository(session).count()

    if existing:
        print(f"Demo data already present ({existing} accounts). Skipping seeding.")
        return

    account = await AccountService().save_read_committed(Account(balance=500))
    print(f"Created account: {account.id} (balance {account.balance})")

    item = await ItemService().save_repeatable_read(Item(store_id=1, quantity=1))
    print(f"Created item: {item.id} (store {item.store_id}, quantity {item.quantity})")

    room = await RoomService().save_serializable(Room(is_available=True, guest_name=None))
    print(f"Created room: {room.id} (available {room.is_available})")


async def main():
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    try:
        await seed_demo_data()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
