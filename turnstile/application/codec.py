"""Schema-driven serialization of domain events for storage backends.

Storage backends persist an event as a discriminator string plus a plain
payload mapping. The codec is built from an explicit list of event classes,
so the set of events a store can read back is decided where the store is
constructed rather than by whatever happens to be importable.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ..domain import DomainEvent, UnknownEventTypeError

_ENVELOPE_FIELDS = frozenset({"aggregate_id", "occurred_at"})


class EncodedEvent(BaseModel):
    """An event's discriminator and payload, ready for storage."""

    event_type: str = Field(description="Stable discriminator of the event class")
    payload: dict[str, Any] = Field(description="Event-specific fields as JSON-compatible values")


class EventCodec:
    """Encodes and decodes a closed set of event classes.

    Each event class contributes its ``event_type`` discriminator. Payloads
    contain only the event-specific fields; the envelope (aggregate ID and
    occurrence time) is stored separately by the backend and handed back on
    decode.

    Examples:
        >>> codec = EventCodec(UserRegistered, UserLoggedIn)
        >>> encoded = codec.encode(event)
        >>> encoded.event_type
        'user.logged_in'
        >>> codec.decode(
        ...     encoded.event_type,
        ...     aggregate_id=event.aggregate_id,
        ...     occurred_at=event.occurred_at,
        ...     payload=encoded.payload,
        ... ) == event
        True
    """

    __slots__ = ("_classes",)

    def __init__(self, *event_classes: type[DomainEvent]):
        """Initialize the codec.

        Args:
            *event_classes: Concrete event classes the codec understands.

        Raises:
            ValueError: If two different classes share a discriminator.
        """
        self._classes: dict[str, type[DomainEvent]] = {}
        for event_class in event_classes:
            event_type = event_class.event_type
            existing = self._classes.get(event_type)
            if existing is not None and existing is not event_class:
                raise ValueError(
                    f"Event type {event_type!r} is declared by both "
                    f"{existing.__name__} and {event_class.__name__}"
                )
            self._classes[event_type] = event_class

    @property
    def event_types(self) -> frozenset[str]:
        """Discriminators known to this codec."""
        return frozenset(self._classes)

    def encode(self, event: DomainEvent) -> EncodedEvent:
        """Encode an event's discriminator and payload.

        Raises:
            UnknownEventTypeError: If the event's class is not part of the codec.
        """
        event_class = type(event)
        event_type = getattr(event_class, "event_type", None)
        if event_type is None or self._classes.get(event_type) is not event_class:
            raise UnknownEventTypeError(f"Event class {event_class.__name__} is not registered")
        return EncodedEvent(
            event_type=event_type,
            payload=event.model_dump(mode="json", exclude=set(_ENVELOPE_FIELDS)),
        )

    def decode(
        self,
        event_type: str,
        aggregate_id: str,
        occurred_at: datetime,
        payload: dict[str, Any],
    ) -> DomainEvent:
        """Rebuild a typed event from stored parts.

        Raises:
            UnknownEventTypeError: If the discriminator is not part of the codec.
        """
        try:
            event_class = self._classes[event_type]
        except KeyError:
            known = ", ".join(sorted(self.event_types))
            raise UnknownEventTypeError(
                f"Unknown event type {event_type!r}, expected one of: {known}"
            ) from None
        return event_class.model_validate(
            {**payload, "aggregate_id": aggregate_id, "occurred_at": occurred_at}
        )
