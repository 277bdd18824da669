"""
Document Store Abstract Base Class

Defines the interface contract for all persistence implementations.
Both MemoryDocumentStore and SQLDocumentStore implement these methods,
so services never depend on a particular database.

Only the primitives the services need are exposed:
    - get by id
    - query with equality filters and optional ordering on one field
    - add / update / delete by id

Design Pattern: Strategy Pattern
    - Runtime switching between in-memory and SQL persistence
    - Tests run against the in-memory store with no database

Author: FoodieHub Team
Version: 1.0.0
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Optional


class Collection:
    """Collection names shared by every store implementation."""
    USERS = "users"
    RESTAURANTS = "restaurants"
    MENU_ITEMS = "menuItems"
    ORDERS = "orders"
    PAYMENT_METHODS = "paymentMethods"

    ALL = (USERS, RESTAURANTS, MENU_ITEMS, ORDERS, PAYMENT_METHODS)


class UnknownCollectionError(KeyError):
    """Raised when a store is asked for a collection it does not hold."""


def new_document_id() -> str:
    """Generate an opaque document id."""
    return uuid.uuid4().hex


class BaseDocumentStore(ABC):
    """
    Abstract base class for document stores.

    Documents are plain dicts keyed by field name; every document carries
    an "id" key. Implementations return copies, so callers may mutate the
    returned dicts freely.

    Example:
        >>> store = get_document_store()
        >>> order = await store.add(Collection.ORDERS, {"status": "pending"})
        >>> await store.update(
        ...     Collection.ORDERS, order["id"], {"status": "paid"},
        ...     expected={"status": "pending"},
        ... )
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the store backend.

        Returns:
            str: Provider name (e.g., "memory", "sql")
        """
        pass

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        """
        Fetch a document by id.

        Returns:
            The document, or None if it does not exist
        """
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Return all documents whose fields equal every value in filters.

        Args:
            collection: Collection name
            filters: Field -> required value (equality only)
            order_by: Field to sort by
            descending: Sort direction for order_by
        """
        pass

    @abstractmethod
    async def add(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a document. An id is generated when data has none.

        Returns:
            The stored document including its id
        """
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        doc_id: str,
        changes: dict[str, Any],
        expected: Optional[dict[str, Any]] = None,
    ) -> Optional[dict[str, Any]]:
        """
        Apply changes to a document.

        When expected is given the write only happens if every expected
        field still holds the given value; check and write are one atomic
        step for the backend.

        Returns:
            The updated document, or None if it is missing or expected
            did not match
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        """
        Delete a document.

        Returns:
            bool: True if a document was removed
        """
        pass

    @abstractmethod
    async def count(self, collection: str) -> int:
        """Number of documents in a collection."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify the backend is reachable.

        Returns:
            bool: True if the store is operational
        """
        pass
