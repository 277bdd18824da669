"""
Document Store Factory

Provides a single entry point for obtaining the document store.
The rest of the application stays agnostic about which backend is used.

Usage:
    from foodiehub.services.store import get_document_store

    # Returns MemoryDocumentStore or SQLDocumentStore based on ENV_MODE
    store = get_document_store()

    restaurants = await store.query("restaurants", {"country": "India"})

Environment Switching:
    - ENV_MODE=development → MemoryDocumentStore (no database)
    - ENV_MODE=staging → SQLDocumentStore (PostgreSQL)
    - ENV_MODE=production → SQLDocumentStore (PostgreSQL)

Author: FoodieHub Team
Version: 1.0.0
"""

import logging
from functools import lru_cache

from foodiehub.core.config import get_settings
from foodiehub.services.store.base import (
    BaseDocumentStore,
    Collection,
    UnknownCollectionError,
    new_document_id,
)
from foodiehub.services.store.memory import MemoryDocumentStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_document_store() -> BaseDocumentStore:
    """
    Get the configured document store instance.

    The instance is cached so the in-memory store keeps its data for the
    life of the process and the SQL store shares one engine.

    Returns:
        BaseDocumentStore: Configured store instance
    """
    settings = get_settings()

    if not settings.use_sql_store:
        logger.info("Document Store: Using MemoryDocumentStore (development mode)")
        return MemoryDocumentStore()

    # Imported lazily so development never touches the database driver
    from foodiehub.database import async_session_maker
    from foodiehub.services.store.sql import SQLDocumentStore

    logger.info(
        f"Document Store: Using SQLDocumentStore "
        f"({settings.env_mode.value} mode)"
    )
    return SQLDocumentStore(async_session_maker)


def reset_document_store() -> None:
    """
    Clear the cached store instance.

    The next call to get_document_store() creates a new instance.
    """
    get_document_store.cache_clear()
    logger.debug("Document store cache cleared")


__all__ = [
    "get_document_store",
    "reset_document_store",
    "BaseDocumentStore",
    "Collection",
    "UnknownCollectionError",
    "new_document_id",
    "MemoryDocumentStore",
]
