"""Domain primitives for event sourcing.

This module contains the building blocks that concrete domains extend:

- DomainEvent: Base class for immutable, UTC-timestamped events
- Aggregate: Base class for aggregates rebuilt from their event history
- Clock: Port supplying the current time
- ConcurrencyError: Exception for optimistic concurrency conflicts
- InvalidArgumentError: Exception for event store misuse
- DomainError: Base class for business rule violations
"""

from .aggregate import Aggregate
from .clock import Clock, SystemClock
from .event import DomainEvent, ensure_utc, utc_now
from .exceptions import (
    ConcurrencyError,
    DomainError,
    InvalidArgumentError,
    UnknownEventTypeError,
)

__all__ = [
    "Aggregate",
    "Clock",
    "SystemClock",
    "DomainEvent",
    "ensure_utc",
    "utc_now",
    "ConcurrencyError",
    "DomainError",
    "InvalidArgumentError",
    "UnknownEventTypeError",
]
