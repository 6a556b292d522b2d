"""Core infrastructure: configuration, logging, database and transactions."""
