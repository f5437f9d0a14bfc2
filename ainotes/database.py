"""
Database connection module.

Provides connect/disconnect lifecycle and get_item_store() accessor.
Routers and services reach the item store through get_item_store().

Typical usage:
    from ainotes.database import get_item_store
    store = get_item_store()
    item = await store.get_item(item_id)
"""

import logging
from typing import Optional

from ainotes.config import get_settings
from ainotes.exceptions import PersistenceFailure
from ainotes.item_store import SQLiteItemStore

logger = logging.getLogger(__name__)

# ============================================================
# Global store instance
# ============================================================
_store: Optional[SQLiteItemStore] = None


async def connect_db(db_path: Optional[str] = None) -> SQLiteItemStore:
    """Initialize the SQLite item store.

    Called once during application startup (main.py lifespan).
    Creates the database file and schema if they don't exist.
    """
    global _store

    path = db_path or get_settings().database_path
    logger.info(f"Connecting to SQLite item store: {path}")

    store = SQLiteItemStore(path)
    await store.connect()
    _store = store

    logger.info("SQLite item store connected successfully")
    return store


async def close_db() -> None:
    """Close the store connection gracefully.

    Called during application shutdown.
    """
    global _store
    if _store:
        await _store.close()
        _store = None
        logger.info("Item store connection closed")


def get_item_store() -> SQLiteItemStore:
    """Get the store instance.

    Raises:
        PersistenceFailure: If connect_db() hasn't been called yet.
    """
    if _store is None:
        raise PersistenceFailure("Item store not initialized. Call connect_db() first.")
    return _store
