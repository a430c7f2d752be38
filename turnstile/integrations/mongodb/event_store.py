"""MongoDB implementation of EventStore for event sourcing."""

import logging
from collections.abc import Sequence
from typing import Any, NoReturn

from pymongo.errors import BulkWriteError, OperationFailure
from ulid import ULID

from ...application import EventCodec, EventStore, ensure_valid_batch
from ...domain import ConcurrencyError, DomainEvent, InvalidArgumentError
from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration

LOGGER = logging.getLogger(__name__)

DUPLICATE_KEY_ERROR = 11000
WRITE_CONFLICT_ERROR = 112


class MongoEventStore(EventStore):
    """MongoDB-backed event store with optimistic concurrency control.

    Each event is stored as one document:
    - aggregate_id, aggregate_type, version: stream coordinates
    - event_type, event_data: the codec's discriminator and payload
    - occurred_at: BSON datetime (millisecond precision)
    - occurred_at_microsecond: sub-second part lost by BSON, restored on read
    - commit_id: ULID shared by all documents of one append

    A unique index on (aggregate_id, aggregate_type, version) is the final
    arbiter of concurrency: if two writers pass the version check at the
    same time, only one of them can insert the next version.

    Batches are atomic. With ``use_transactions`` enabled (the default) the
    batch is inserted inside a multi-document transaction, so no other
    reader or writer sees part of it. Without transactions only single-event
    appends are accepted, because a lone document insert is atomic on its
    own.

    Example:
        >>> config = MongoConfiguration(uri="mongodb://localhost:27017")
        >>> store = MongoEventStore(config, EventCodec(*USER_EVENTS))
        >>> await store.append(user_id, "user", events, expected_version=0)
        >>> loaded = await store.get_events(user_id, "user")
    """

    def __init__(self, config: MongoConfiguration, codec: EventCodec):
        """Initialize the MongoDB event store.

        Args:
            config: MongoDB configuration providing the events collection.
            codec: Codec for the event classes this store persists.
        """
        self._config = config
        self._codec = codec
        self._events = IndexedCollection(
            config.events,
            indexes=[
                IndexSpec(
                    keys=[
                        ("aggregate_id", IndexDirection.ASC),
                        ("aggregate_type", IndexDirection.ASC),
                        ("version", IndexDirection.ASC),
                    ],
                    unique=True,
                    name="aggregate_version_unique",
                ),
            ],
        )

    async def append(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        expected_version: int,
    ) -> None:
        ensure_valid_batch(aggregate_id, events, expected_version)
        if len(events) > 1 and not self._config.use_transactions:
            raise InvalidArgumentError(
                f"Cannot append {len(events)} events to aggregate {aggregate_id!r} atomically "
                "without transactions"
            )

        current_version = await self.get_version(aggregate_id, aggregate_type)
        if current_version != expected_version:
            self._conflict(aggregate_id, aggregate_type, expected_version, current_version)

        commit_id = str(ULID())
        documents = [
            self._to_document(event, aggregate_type, expected_version + offset, commit_id)
            for offset, event in enumerate(events, start=1)
        ]

        try:
            await self._insert(documents)
        except OperationFailure as e:
            if not _is_version_clash(e):
                raise
            current_version = await self.get_version(aggregate_id, aggregate_type)
            self._conflict(
                aggregate_id, aggregate_type, expected_version, current_version, cause=e
            )

        LOGGER.debug(
            "Appended events",
            extra={
                "aggregate_id": aggregate_id,
                "aggregate_type": aggregate_type,
                "event_count": len(documents),
                "version": expected_version + len(documents),
            },
        )

    async def get_events(self, aggregate_id: str, aggregate_type: str) -> list[DomainEvent]:
        return [
            self._from_document(doc)
            async for doc in self._events.find(
                {"aggregate_id": aggregate_id, "aggregate_type": aggregate_type},
                sort=[("version", IndexDirection.ASC)],
            )
        ]

    async def get_version(self, aggregate_id: str, aggregate_type: str) -> int:
        return await self._events.count(
            {"aggregate_id": aggregate_id, "aggregate_type": aggregate_type}
        )

    async def _insert(self, documents: list[dict[str, Any]]) -> None:
        if not self._config.use_transactions:
            await self._events.insert_many(documents)
            return

        await self._events.ensure_indexes()
        async with self._config.client.start_session() as session:
            async with await session.start_transaction():
                await self._events.insert_many(documents, session=session)

    def _conflict(
        self,
        aggregate_id: str,
        aggregate_type: str,
        expected_version: int,
        current_version: int,
        cause: BaseException | None = None,
    ) -> NoReturn:
        LOGGER.warning(
            "Concurrency conflict on append",
            extra={
                "aggregate_id": aggregate_id,
                "aggregate_type": aggregate_type,
                "expected_version": expected_version,
                "current_version": current_version,
            },
        )
        raise ConcurrencyError(
            aggregate_id, aggregate_type, expected_version, current_version
        ) from cause

    def _to_document(
        self, event: DomainEvent, aggregate_type: str, version: int, commit_id: str
    ) -> dict[str, Any]:
        encoded = self._codec.encode(event)
        return {
            "aggregate_id": event.aggregate_id,
            "aggregate_type": aggregate_type,
            "version": version,
            "event_type": encoded.event_type,
            "event_data": encoded.payload,
            "occurred_at": event.occurred_at,
            "occurred_at_microsecond": event.occurred_at.microsecond,
            "commit_id": commit_id,
        }

    def _from_document(self, doc: dict[str, Any]) -> DomainEvent:
        occurred_at = doc["occurred_at"].replace(
            microsecond=doc.get("occurred_at_microsecond", doc["occurred_at"].microsecond)
        )
        return self._codec.decode(
            doc["event_type"],
            aggregate_id=doc["aggregate_id"],
            occurred_at=occurred_at,
            payload=doc["event_data"],
        )


def _is_version_clash(error: OperationFailure) -> bool:
    """Check whether an insert lost against another writer of the same version.

    Outside a transaction the unique index reports a duplicate key. Inside
    one, a clash with another open transaction is reported as a write
    conflict.
    """
    clash_codes = {DUPLICATE_KEY_ERROR, WRITE_CONFLICT_ERROR}
    if error.code in clash_codes:
        return True
    if isinstance(error, BulkWriteError):
        return any(
            write_error.get("code") in clash_codes
            for write_error in error.details.get("writeErrors", [])
        )
    return False
