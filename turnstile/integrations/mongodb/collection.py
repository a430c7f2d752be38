"""MongoDB collection wrapper with index management and query helpers.

This module provides an IndexedCollection class that wraps a MongoDB
AsyncCollection with lazy index creation and the handful of operations the
storage backends need.
"""

from collections.abc import AsyncIterator
from enum import IntEnum
from typing import Any

from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.collection import AsyncCollection


class IndexDirection(IntEnum):
    """Sort direction for MongoDB index fields."""

    ASC = ASCENDING
    """Ascending order (1)."""

    DESC = DESCENDING
    """Descending order (-1)."""


class IndexSpec(BaseModel):
    """Specification for a MongoDB index.

    Example:
        >>> # Compound unique index
        >>> IndexSpec(
        ...     keys=[
        ...         ("aggregate_id", IndexDirection.ASC),
        ...         ("aggregate_type", IndexDirection.ASC),
        ...         ("version", IndexDirection.ASC),
        ...     ],
        ...     unique=True,
        ...     name="aggregate_version_unique",
        ... )
    """

    keys: list[tuple[str, IndexDirection]]
    """(field_name, direction) tuples."""

    unique: bool = False
    """If True, enforce uniqueness."""

    name: str | None = None
    """Explicit index name; MongoDB derives one from the keys if omitted."""

    async def apply(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        """Apply this index specification to a collection.

        Creating an index that already exists with the same options is a
        no-op on the server.
        """
        kwargs: dict[str, Any] = {}
        if self.unique:
            kwargs["unique"] = True
        if self.name is not None:
            kwargs["name"] = self.name

        await collection.create_index(
            [(field, int(direction)) for field, direction in self.keys], **kwargs
        )


class IndexedCollection:
    """A MongoDB collection wrapper with automatic index management.

    IndexedCollection wraps an AsyncCollection and handles:
    - Lazy index creation (indexes created on first use)
    - Common query patterns (find one, find many, count)
    - Insert and update operations, optionally inside a session

    The backends handle conversion between domain objects and documents;
    IndexedCollection handles MongoDB operations and indexing.

    Example:
        >>> collection = IndexedCollection(
        ...     config.events,
        ...     indexes=[
        ...         IndexSpec(
        ...             keys=[("aggregate_id", 1), ("version", 1)],
        ...             unique=True,
        ...         ),
        ...     ]
        ... )
        >>>
        >>> # Indexes are created on first operation
        >>> await collection.insert_many(docs)
        >>> async for doc in collection.find({"aggregate_id": "..."}):
        ...     print(doc)
    """

    def __init__(
        self,
        collection: AsyncCollection[dict[str, Any]],
        indexes: list[IndexSpec] | None = None,
    ) -> None:
        """Initialize the indexed collection.

        Args:
            collection: The underlying MongoDB AsyncCollection.
            indexes: List of index specifications to create.
        """
        self._collection = collection
        self._indexes = indexes or []
        self._indexes_created = False

    async def ensure_indexes(self) -> None:
        """Create indexes if not already created.

        Called automatically by other methods, but can be called
        explicitly for eager initialization.
        """
        if self._indexes_created:
            return

        for spec in self._indexes:
            await spec.apply(self._collection)

        self._indexes_created = True

    # ========== Find Operations ==========

    async def find_one(
        self,
        filter: dict[str, Any],
        projection: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Find a single document matching the filter."""
        await self.ensure_indexes()
        result: dict[str, Any] | None = await self._collection.find_one(
            filter, projection=projection
        )
        return result

    async def find(
        self,
        filter: dict[str, Any],
        sort: list[tuple[str, int]] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Find documents matching the filter.

        Args:
            filter: MongoDB query filter.
            sort: Optional list of (field, direction) tuples.

        Yields:
            Matching documents.
        """
        await self.ensure_indexes()

        cursor = self._collection.find(filter)
        if sort:
            cursor = cursor.sort(sort)

        async for doc in cursor:
            yield doc

    async def count(self, filter: dict[str, Any]) -> int:
        """Count documents matching the filter."""
        await self.ensure_indexes()
        return await self._collection.count_documents(filter)

    # ========== Write Operations ==========

    async def insert_many(
        self,
        documents: list[dict[str, Any]],
        session: AsyncClientSession | None = None,
    ) -> None:
        """Insert documents in order, stopping at the first error.

        Args:
            documents: List of documents to insert.
            session: Optional session, e.g. one with an active transaction.
        """
        await self.ensure_indexes()
        await self._collection.insert_many(documents, ordered=True, session=session)

    async def update_one(
        self,
        filter: dict[str, Any],
        update: dict[str, Any] | list[dict[str, Any]],
        upsert: bool = False,
    ) -> None:
        """Update a single document.

        Args:
            filter: MongoDB query filter.
            update: Update operations or an aggregation pipeline.
            upsert: If True, insert if no matching document exists.
        """
        await self.ensure_indexes()
        await self._collection.update_one(filter, update, upsert=upsert)
