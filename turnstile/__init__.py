"""Turnstile - event-sourced user accounts for Python.

This module provides the public API: the event sourcing primitives, the
event store port with its dispatching decorator, and the user domain.
"""

from .application import (
    ConcurrencyRetry,
    DispatchingEventStore,
    EventCodec,
    EventListener,
    EventStore,
    InMemoryEventStore,
)
from .domain import (
    Aggregate,
    Clock,
    ConcurrencyError,
    DomainError,
    DomainEvent,
    InvalidArgumentError,
    SystemClock,
)
from .users import (
    CouldNotAuthenticate,
    CouldNotRegister,
    Login,
    LoginHandler,
    RegisterUser,
    RegisterUserHandler,
    User,
)

__all__ = [
    # Domain primitives
    "Aggregate",
    "DomainEvent",
    "Clock",
    "SystemClock",
    # Errors
    "ConcurrencyError",
    "DomainError",
    "InvalidArgumentError",
    "CouldNotAuthenticate",
    "CouldNotRegister",
    # Event store
    "EventStore",
    "InMemoryEventStore",
    "DispatchingEventStore",
    "EventListener",
    "EventCodec",
    "ConcurrencyRetry",
    # Users
    "User",
    "RegisterUser",
    "RegisterUserHandler",
    "Login",
    "LoginHandler",
]
