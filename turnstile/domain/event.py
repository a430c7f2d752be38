from datetime import datetime, timezone
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information
    """
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC.

    Naive datetimes are interpreted as already being in UTC.

    Args:
        value: The datetime to normalize.

    Returns:
        An aware datetime in the UTC timezone representing the same instant.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DomainEvent(BaseModel):
    """Immutable record of something that happened to one aggregate.

    DomainEvent is the base class for every concrete event. It carries the
    envelope shared by all events - the owning aggregate's identifier and the
    instant the event occurred - while subclasses add their own payload
    fields.

    Events are:

    - **Immutable**: models are frozen, fields cannot be reassigned
    - **Owned**: every event belongs to exactly one aggregate instance
    - **Timestamped**: ``occurred_at`` is always normalized to UTC
    - **Discriminated**: each concrete class declares a stable
      ``event_type`` used as the wire discriminator, so persisted data does
      not depend on Python module paths

    Attributes:
        aggregate_id: Identifier of the aggregate that produced the event.
        occurred_at: When the event occurred (UTC).

    Examples:
        >>> class AccountOpened(DomainEvent):
        ...     event_type: ClassVar[str] = "account.opened"
        ...     owner: str
        >>>
        >>> event = AccountOpened(
        ...     aggregate_id="acc-1",
        ...     occurred_at=utc_now(),
        ...     owner="Alice",
        ... )
    """

    model_config = ConfigDict(frozen=True)

    event_type: ClassVar[str]

    aggregate_id: str = Field(
        min_length=1,
        description="ID of the aggregate that produced this event",
    )
    occurred_at: datetime = Field(description="When the event occurred (UTC timezone)")

    @field_validator("occurred_at")
    @classmethod
    def _normalize_occurred_at(cls, value: datetime) -> datetime:
        return ensure_utc(value)
