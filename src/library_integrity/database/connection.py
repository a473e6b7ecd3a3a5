"""
Store creation and lifecycle
"""

import logging
from typing import Optional

from library_integrity.config.settings import Settings
from library_integrity.database.clock import Clock, ManualClock, SystemClock
from library_integrity.database.memory import MemoryStore
from library_integrity.database.postgres import PostgresStore
from library_integrity.database.store import Store

logger = logging.getLogger(__name__)


def create_store(settings: Settings, backend: Optional[str] = None, clock: Optional[Clock] = None) -> Store:
    """Build an unconnected store for the requested backend"""
    backend = (backend or settings.store_backend).lower()

    if backend == "memory":
        return MemoryStore(clock or ManualClock())
    if backend == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL environment variable is required for the postgres backend")
        return PostgresStore(
            settings.database_url,
            clock=clock or SystemClock(),
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            command_timeout=settings.command_timeout,
        )
    raise ValueError(f"Unsupported store backend: {backend}")


async def open_store(settings: Settings, backend: Optional[str] = None, clock: Optional[Clock] = None) -> Store:
    """Create, connect and (for PostgreSQL) bootstrap a store"""
    store = create_store(settings, backend, clock)
    await store.connect()

    if isinstance(store, PostgresStore) and settings.bootstrap_schema:
        await store.ensure_schema()

    logger.info(f"Store initialized successfully ({store.backend})")
    return store


async def close_store(store: Optional[Store]) -> None:
    """Close a store opened with open_store"""
    if store is not None:
        await store.close()
        logger.info(f"Store connections closed ({store.backend})")
