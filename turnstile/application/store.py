"""Event store interfaces and implementations for durable event persistence."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..domain import ConcurrencyError, DomainEvent, InvalidArgumentError

LOGGER = logging.getLogger(__name__)


def ensure_valid_batch(
    aggregate_id: str,
    events: Sequence[DomainEvent],
    expected_version: int,
) -> None:
    """Validate the arguments of an append call.

    Args:
        aggregate_id: The stream's aggregate identifier.
        events: The batch of events to append.
        expected_version: The version the caller observed.

    Raises:
        InvalidArgumentError: If the batch is empty, the expected version is
            negative, or an event belongs to a different aggregate.
    """
    if not events:
        raise InvalidArgumentError(f"Cannot append an empty batch to aggregate {aggregate_id!r}")
    if expected_version < 0:
        raise InvalidArgumentError(f"Expected version must be non-negative, got {expected_version}")
    for event in events:
        if event.aggregate_id != aggregate_id:
            raise InvalidArgumentError(
                f"Event aggregate ID {event.aggregate_id!r} does not match "
                f"aggregate ID {aggregate_id!r}"
            )


class EventStore(ABC):
    """Abstract interface for durable event persistence.

    EventStore persists events as an immutable, append-only log. Each
    ``(aggregate_id, aggregate_type)`` pair identifies one stream; the
    aggregate type is part of the key because different kinds of aggregate
    may share an ID space.

    Key responsibilities:
    - **Durability**: Events survive system failures
    - **Ordering**: Events are stored and retrieved in version order
    - **Concurrency Control**: Optimistic locking via expected_version
    - **Atomicity**: A batch is stored completely or not at all

    Stores never retry internally. A ConcurrencyError is the only expected
    failure of ``append``; any other storage error propagates unchanged.
    """

    __slots__ = ()

    @abstractmethod
    async def append(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        expected_version: int,
    ) -> None:
        """Append events to a stream with optimistic concurrency control.

        Args:
            aggregate_id: The stream's aggregate identifier. Every event in
                the batch must carry the same ID.
            aggregate_type: The stream's aggregate type.
            events: Non-empty, ordered batch of events to append.
            expected_version: The stream version the caller observed before
                producing these events.

        Raises:
            InvalidArgumentError: If the batch is empty or mixes aggregates.
            ConcurrencyError: If expected_version doesn't match the current
                version of the stream. Nothing is written in that case.
        """
        ...

    @abstractmethod
    async def get_events(self, aggregate_id: str, aggregate_type: str) -> list[DomainEvent]:
        """Load all events of a stream in version order.

        Returns:
            The stream's events, or an empty list if the stream is unknown.
        """
        ...

    @abstractmethod
    async def get_version(self, aggregate_id: str, aggregate_type: str) -> int:
        """Get the number of events appended to a stream.

        Returns:
            The stream's version, or 0 if the stream is unknown.
        """
        ...


class InMemoryEventStore(EventStore):
    """Dictionary-based in-memory event store.

    Stores each stream as a list keyed by ``(aggregate_type, aggregate_id)``.
    The version check and the append happen without any suspension point in
    between, so concurrent tasks on the same event loop cannot both win the
    same version.

    This implementation is suitable for:
    - Unit and use-case tests (fast, no external dependencies)
    - Development and experimentation

    It is not durable: data is lost when the process exits.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory event store."""
        self._streams: dict[tuple[str, str], list[DomainEvent]] = {}

    async def append(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        expected_version: int,
    ) -> None:
        ensure_valid_batch(aggregate_id, events, expected_version)

        stream = self._streams.get((aggregate_type, aggregate_id), [])
        current_version = len(stream)
        if current_version != expected_version:
            LOGGER.warning(
                "Concurrency conflict on append",
                extra={
                    "aggregate_id": aggregate_id,
                    "aggregate_type": aggregate_type,
                    "expected_version": expected_version,
                    "current_version": current_version,
                },
            )
            raise ConcurrencyError(aggregate_id, aggregate_type, expected_version, current_version)

        self._streams[(aggregate_type, aggregate_id)] = [*stream, *events]

    async def get_events(self, aggregate_id: str, aggregate_type: str) -> list[DomainEvent]:
        return list(self._streams.get((aggregate_type, aggregate_id), []))

    async def get_version(self, aggregate_id: str, aggregate_type: str) -> int:
        return len(self._streams.get((aggregate_type, aggregate_id), []))
