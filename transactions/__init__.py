"""
Transactional entity persistence with selectable isolation levels.

Accounts, items and rooms are persisted through typed repositories;
services wrap each save in a transaction whose isolation level the
caller chooses (READ COMMITTED, REPEATABLE READ or SERIALIZABLE).
"""

__version__ = "0.1.0"
