"""Dispatch of committed events to listeners.

This module provides:
- EventListener: Abstract consumer of committed events (projections, side effects)
- DispatchingEventStore: EventStore decorator that publishes events only
  after the wrapped store has durably appended them
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..domain import DomainEvent
from .store import EventStore

LOGGER = logging.getLogger(__name__)


class EventListener(ABC):
    """Consumer of committed events.

    Listeners receive one event at a time, in append order. The same event
    may be delivered more than once (for example when a projection is
    rebuilt by replaying a stream), so implementations must be idempotent.
    """

    __slots__ = ()

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """Process a single committed event."""
        ...


class DispatchingEventStore(EventStore):
    """EventStore decorator that publishes appended events after commit.

    After the inner store's ``append`` succeeds, every event of the batch is
    delivered to every listener: events in append order, and for each event
    the listeners in the order they were given. If the inner append raises,
    nothing is published, so listeners never observe events that were not
    persisted.

    Characteristics:
    - Delivery is synchronous: ``append`` returns after all listeners ran
    - Listener failures propagate to the caller; the events remain
      committed and later deliveries of the same batch are skipped
    - No retries of failed listeners; projections are rebuilt by replay

    Example:
        >>> read_model = InMemoryUserReadModel()
        >>> store = DispatchingEventStore(InMemoryEventStore(), [read_model])
        >>> await store.append(user_id, "user", events, expected_version=0)
        >>> # read_model has already seen every event in ``events``
    """

    __slots__ = ("_inner", "_listeners")

    def __init__(self, inner: EventStore, listeners: Sequence[EventListener]):
        """Initialize the dispatching store.

        Args:
            inner: The store that durably persists events.
            listeners: Listeners to notify of committed events.
        """
        self._inner = inner
        self._listeners = tuple(listeners)

    async def append(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        expected_version: int,
    ) -> None:
        await self._inner.append(aggregate_id, aggregate_type, events, expected_version)

        for position, event in enumerate(events, start=expected_version + 1):
            for listener in self._listeners:
                try:
                    await listener.handle(event)
                except Exception:
                    LOGGER.exception(
                        "Listener failed after events were committed",
                        extra={
                            "aggregate_id": aggregate_id,
                            "aggregate_type": aggregate_type,
                            "version": position,
                            "event_type": event.event_type,
                            "listener": type(listener).__name__,
                        },
                    )
                    raise

    async def get_events(self, aggregate_id: str, aggregate_type: str) -> list[DomainEvent]:
        return await self._inner.get_events(aggregate_id, aggregate_type)

    async def get_version(self, aggregate_id: str, aggregate_type: str) -> int:
        return await self._inner.get_version(aggregate_id, aggregate_type)
