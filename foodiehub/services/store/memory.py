"""
In-Memory Document Store Implementation

Keeps every collection in a process-local dict. Used in development mode
(ENV_MODE=development) and by the test suite to:
    - Run the API without a database
    - Start each test from an empty store

Behavior:
    - Returns deep copies so callers never alias stored state
    - Conditional updates are atomic (no await between check and write)
    - Data is lost when the process exits

Author: FoodieHub Team
Version: 1.0.0
"""

import copy
import logging
from typing import Any, Optional

from foodiehub.services.store.base import (
    BaseDocumentStore,
    Collection,
    UnknownCollectionError,
    new_document_id,
)

logger = logging.getLogger(__name__)


class MemoryDocumentStore(BaseDocumentStore):
    """
    Dict-backed implementation of the document store.

    Example:
        >>> store = MemoryDocumentStore()
        >>> doc = await store.add("restaurants", {"name": "Spice Garden"})
        >>> (await store.get("restaurants", doc["id"]))["name"]
        'Spice Garden'
    """

    def __init__(self):
        self._collections: dict[str, dict[str, dict[str, Any]]] = {
            name: {} for name in Collection.ALL
        }
        logger.info("MemoryDocumentStore initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "memory"

    def _documents(self, collection: str) -> dict[str, dict[str, Any]]:
        try:
            return self._collections[collection]
        except KeyError:
            raise UnknownCollectionError(collection)

    async def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        document = self._documents(collection).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def query(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        filters = filters or {}
        matches = [
            doc for doc in self._documents(collection).values()
            if all(doc.get(field) == value for field, value in filters.items())
        ]

        if order_by:
            matches.sort(key=lambda doc: doc.get(order_by), reverse=descending)

        return copy.deepcopy(matches)

    async def add(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        documents = self._documents(collection)
        document = copy.deepcopy(data)
        document["id"] = document.get("id") or new_document_id()
        documents[document["id"]] = document

        logger.debug(f"Memory: added {collection}/{document['id']}")
        return copy.deepcopy(document)

    async def update(
        self,
        collection: str,
        doc_id: str,
        changes: dict[str, Any],
        expected: Optional[dict[str, Any]] = None,
    ) -> Optional[dict[str, Any]]:
        document = self._documents(collection).get(doc_id)
        if document is None:
            return None

        for field, value in (expected or {}).items():
            if document.get(field) != value:
                logger.debug(
                    f"Memory: conditional update of {collection}/{doc_id} rejected "
                    f"({field}={document.get(field)!r}, expected {value!r})"
                )
                return None

        document.update(copy.deepcopy(changes))
        return copy.deepcopy(document)

    async def delete(self, collection: str, doc_id: str) -> bool:
        return self._documents(collection).pop(doc_id, None) is not None

    async def count(self, collection: str) -> int:
        return len(self._documents(collection))

    async def health_check(self) -> bool:
        """The in-memory store is always available."""
        return True
