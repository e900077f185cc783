"""
Transactional store adapters.

- base: operation registry, StoreError and the abstract executor
- postgres: asyncpg adapter calling database functions
- memory: lock-guarded in-process adapter for tests and local development
"""

from .base import (
    FORBIDDEN,
    NOT_FOUND,
    INVALID_STATE,
    INVALID_INPUT,
    OPERATIONS,
    StoreError,
    UnknownOperation,
    TransactionalStore,
)
from .memory import MemoryStore
from .postgres import PostgresStore


async def create_store(backend: str, dsn: str = "") -> TransactionalStore:
    """
    Build the store selected by configuration.

    ``memory`` needs nothing external; ``postgres`` opens a pool on ``dsn``.
    """
    if backend == "memory":
        return MemoryStore()
    if backend == "postgres":
        return await PostgresStore.connect(dsn)
    raise ValueError(f"Unknown store backend: {backend}")


__all__ = [
    "FORBIDDEN",
    "NOT_FOUND",
    "INVALID_STATE",
    "INVALID_INPUT",
    "OPERATIONS",
    "StoreError",
    "UnknownOperation",
    "TransactionalStore",
    "MemoryStore",
    "PostgresStore",
    "create_store",
]
