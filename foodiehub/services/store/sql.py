"""
SQL Document Store Implementation

Persists documents in PostgreSQL through the SQLAlchemy async engine.
Used in staging and production (ENV_MODE=staging|production).

Each collection maps onto one ORM table from foodiehub.models; documents
are the rows' column dicts. Every primitive opens its own short-lived
session, matching the one-round-trip-per-call model of the services.

Author: FoodieHub Team
Version: 1.0.0
"""

import logging
from typing import Any, Optional

from sqlalchemy import select, func, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from foodiehub.models import User, Restaurant, MenuItem, Order, PaymentMethod
from foodiehub.services.store.base import (
    BaseDocumentStore,
    Collection,
    UnknownCollectionError,
    new_document_id,
)

logger = logging.getLogger(__name__)


class SQLDocumentStore(BaseDocumentStore):
    """
    SQLAlchemy implementation of the document store.

    Args:
        session_maker: Factory for AsyncSession objects bound to the engine

    Example:
        >>> from foodiehub.database import async_session_maker
        >>> store = SQLDocumentStore(async_session_maker)
        >>> await store.query("restaurants", {"country": "India"})
    """

    MODELS = {
        Collection.USERS: User,
        Collection.RESTAURANTS: Restaurant,
        Collection.MENU_ITEMS: MenuItem,
        Collection.ORDERS: Order,
        Collection.PAYMENT_METHODS: PaymentMethod,
    }

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        logger.info("SQLDocumentStore initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "sql"

    def _model(self, collection: str):
        try:
            return self.MODELS[collection]
        except KeyError:
            raise UnknownCollectionError(collection)

    @staticmethod
    def _column(model, field: str):
        column = getattr(model, field, None)
        if column is None:
            raise ValueError(f"{model.__tablename__} has no field {field!r}")
        return column

    async def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        model = self._model(collection)
        async with self._session_maker() as session:
            row = await session.get(model, doc_id)
            return row.to_dict() if row is not None else None

    async def query(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        model = self._model(collection)
        stmt = select(model)

        for field, value in (filters or {}).items():
            stmt = stmt.where(self._column(model, field) == value)

        if order_by:
            column = self._column(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())

        async with self._session_maker() as session:
            result = await session.execute(stmt)
            return [row.to_dict() for row in result.scalars().all()]

    async def add(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        model = self._model(collection)
        row = model(**{**data, "id": data.get("id") or new_document_id()})

        async with self._session_maker() as session:
            session.add(row)
            try:
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise
            await session.refresh(row)

            logger.debug(f"SQL: added {collection}/{row.id}")
            return row.to_dict()

    async def update(
        self,
        collection: str,
        doc_id: str,
        changes: dict[str, Any],
        expected: Optional[dict[str, Any]] = None,
    ) -> Optional[dict[str, Any]]:
        model = self._model(collection)
        stmt = update(model).where(model.id == doc_id)

        for field, value in (expected or {}).items():
            stmt = stmt.where(self._column(model, field) == value)

        stmt = stmt.values(**changes).execution_options(synchronize_session=False)

        async with self._session_maker() as session:
            try:
                result = await session.execute(stmt)
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

        if result.rowcount == 0:
            logger.debug(f"SQL: update of {collection}/{doc_id} matched no row")
            return None

        return await self.get(collection, doc_id)

    async def delete(self, collection: str, doc_id: str) -> bool:
        model = self._model(collection)

        async with self._session_maker() as session:
            try:
                result = await session.execute(
                    delete(model)
                    .where(model.id == doc_id)
                    .execution_options(synchronize_session=False)
                )
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

        return result.rowcount > 0

    async def count(self, collection: str) -> int:
        model = self._model(collection)
        async with self._session_maker() as session:
            result = await session.execute(select(func.count(model.id)))
            return result.scalar() or 0

    async def health_check(self) -> bool:
        """Run a trivial query against the database."""
        try:
            async with self._session_maker() as session:
                await session.execute(select(func.now()))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
