"""
Table store lifecycle.

open_store() is called once at application startup, store.close() at shutdown.
Nothing outside this module decides which adapter backs the app.
"""

from __future__ import annotations

import logging

from kitchen.kernel.postgres_store import PostgresTableStore
from kitchen.kernel.table_store import MemoryTableStore, TableStore
from kitchen_api.config import Settings

logger = logging.getLogger(__name__)


async def open_store(settings: Settings) -> TableStore:
    """
    Build the table store for settings.

    Without a DATABASE_URL the app runs on in-memory tables. That is expected
    for local development and lost on restart.
    """
    if settings.uses_memory_store:
        logger.warning(
            "No DATABASE_URL configured, using in-memory tables. "
            "Fine for local development, nothing will be persisted."
        )
        return MemoryTableStore()

    store = await PostgresTableStore.connect(settings.table_store_config())
    logger.info("Table store connected (table '%s')", settings.TABLE_NAME)
    return store
