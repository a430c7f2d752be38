"""Event store infrastructure for turnstile.

This package provides the storage-side building blocks:
- EventStore: Port for append-only, version-checked event streams
- InMemoryEventStore: Reference implementation of the port
- EventCodec: Explicit serializer for a closed set of event classes
- DispatchingEventStore: Publishes events to listeners after commit
- ConcurrencyRetry: Caller-level retry for handlers losing version races
"""

from .codec import EncodedEvent, EventCodec
from .dispatching import DispatchingEventStore, EventListener
from .retry import ConcurrencyRetry
from .store import EventStore, InMemoryEventStore, ensure_valid_batch

__all__ = [
    "EventStore",
    "InMemoryEventStore",
    "ensure_valid_batch",
    "EventCodec",
    "EncodedEvent",
    "DispatchingEventStore",
    "EventListener",
    "ConcurrencyRetry",
]
