"""Helpers for testing code built on turnstile."""

from .aggregate_scenario import AggregateScenario
from .fakes import DEFAULT_NOW, FailingListener, FakePasswordHasher, FrozenClock, RecordingListener

__all__ = [
    "AggregateScenario",
    "DEFAULT_NOW",
    "FailingListener",
    "FakePasswordHasher",
    "FrozenClock",
    "RecordingListener",
]
