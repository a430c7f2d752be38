"""MongoDB integration for turnstile.

This module provides MongoDB implementations of the EventStore and the user
read model using the async PyMongo driver.

Usage:
    >>> from turnstile.application import DispatchingEventStore, EventCodec
    >>> from turnstile.integrations.mongodb import (
    ...     MongoConfiguration,
    ...     MongoEventStore,
    ...     MongoUserReadModel,
    ... )
    >>> from turnstile.users import USER_EVENTS
    >>>
    >>> config = MongoConfiguration(uri="mongodb://localhost:27017", database="myapp")
    >>> read_model = MongoUserReadModel(config)
    >>> event_store = DispatchingEventStore(
    ...     MongoEventStore(config, EventCodec(*USER_EVENTS)),
    ...     listeners=[read_model],
    ... )
"""

from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration
from .event_store import MongoEventStore
from .read_model import MongoUserReadModel

__all__ = [
    "MongoConfiguration",
    "MongoEventStore",
    "MongoUserReadModel",
    "IndexedCollection",
    "IndexSpec",
    "IndexDirection",
]
