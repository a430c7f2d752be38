"""Tests for MongoEventStore checks that run before touching the server."""

from datetime import datetime, timedelta, timezone

import pytest

from turnstile.application import EventCodec
from turnstile.domain import InvalidArgumentError
from turnstile.integrations.mongodb import MongoConfiguration, MongoEventStore
from turnstile.users import USER_EVENTS, UserLoggedIn

NOW = datetime(2025, 1, 15, 12, tzinfo=timezone.utc)


async def test_multi_event_append_requires_transactions():
    """Test that a batch is refused when it cannot be inserted atomically."""
    # Nothing listens on this port; the append must fail before any I/O.
    config = MongoConfiguration(
        uri="mongodb://localhost:1",
        use_transactions=False,
        server_selection_timeout_ms=100,
    )
    store = MongoEventStore(config, EventCodec(*USER_EVENTS))
    batch = [
        UserLoggedIn(aggregate_id="u-1", occurred_at=NOW),
        UserLoggedIn(aggregate_id="u-1", occurred_at=NOW + timedelta(minutes=1)),
    ]

    try:
        with pytest.raises(InvalidArgumentError, match="without transactions"):
            await store.append("u-1", "user", batch, expected_version=1)
    finally:
        await config.on_shutdown()
