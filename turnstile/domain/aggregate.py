from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import ClassVar, Generic, TypeVar

from typing_extensions import Self

from .event import DomainEvent

E = TypeVar("E", bound=DomainEvent)


class Aggregate(ABC, Generic[E]):
    """Base class for event-sourced aggregates.

    An aggregate's state is derived entirely from its ordered event history.
    Behavior methods validate preconditions against the current state and
    call ``_record_that`` with a new event instead of mutating state
    directly. ``_record_that`` applies the event and buffers it until the
    caller releases the buffer for persistence.

    Subclasses must:

    - declare ``aggregate_type``, the namespace of their event streams
    - implement ``_apply`` as an exhaustive match over their event variants
    - keep their state in private attributes, assigned only from ``_apply``

    Type Parameters:
        E: The closed union of event classes this aggregate understands.

    Examples:
        >>> class Counter(Aggregate[Incremented]):
        ...     aggregate_type: ClassVar[str] = "counter"
        ...
        ...     def __init__(self) -> None:
        ...         super().__init__()
        ...         self._count = 0
        ...
        ...     def increment(self, counter_id: str, now: datetime) -> None:
        ...         self._record_that(Incremented(aggregate_id=counter_id, occurred_at=now))
        ...
        ...     def _apply(self, event: Incremented) -> None:
        ...         match event:
        ...             case Incremented():
        ...                 self._count += 1
        ...             case _:
        ...                 assert_never(event)
    """

    aggregate_type: ClassVar[str]

    def __init__(self) -> None:
        self._version = 0
        self._recorded_events: list[E] = []

    @classmethod
    def reconstitute(cls, events: Iterable[E]) -> Self:
        """Rebuild an aggregate by replaying its event history in order.

        Args:
            events: The aggregate's events, ordered by version.

        Returns:
            An aggregate whose state reflects every event, with an empty
            buffer of recorded events.
        """
        aggregate = cls()
        for event in events:
            aggregate._apply(event)
            aggregate._version += 1
        return aggregate

    @property
    def version(self) -> int:
        """Number of events applied, including recorded but unreleased ones."""
        return self._version

    @property
    def committed_version(self) -> int:
        """Version of the stream before the currently recorded events.

        This is the value to use as ``expected_version`` when appending the
        events returned by ``release_events``.
        """
        return self._version - len(self._recorded_events)

    def release_events(self) -> list[E]:
        """Return the recorded events and clear the internal buffer.

        Returns:
            Events recorded since the last release, in the order they were
            recorded. A second call without new behavior returns an empty
            list.
        """
        events, self._recorded_events = self._recorded_events, []
        return events

    def _record_that(self, event: E) -> None:
        self._apply(event)
        self._version += 1
        self._recorded_events.append(event)

    @abstractmethod
    def _apply(self, event: E) -> None:
        """Update the aggregate's state from a single event.

        Implementations must handle every variant of ``E``; an unexpected
        event is a programming error and must fail loudly.
        """
        ...
