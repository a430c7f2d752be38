"""Central test fixtures."""

from uuid import uuid4

import pytest

from turnstile.testing import FakePasswordHasher, FrozenClock, RecordingListener
from turnstile.users import InMemoryUserReadModel


@pytest.fixture
def user_id() -> str:
    """Generate a unique user ID."""
    return str(uuid4())


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at 2025-01-15 12:00 UTC."""
    return FrozenClock()


@pytest.fixture
def password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def read_model() -> InMemoryUserReadModel:
    return InMemoryUserReadModel()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()
