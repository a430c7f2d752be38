"""Tests for AggregateScenario."""

from datetime import date, datetime, timezone

import pytest

from turnstile.testing import AggregateScenario, FakePasswordHasher
from turnstile.users import (
    CouldNotAuthenticate,
    PlainPassword,
    User,
    UserLoggedIn,
    UserRegistered,
)

USER_ID = "5d0e0a4e-0c55-4f6e-8f56-0d3f0f3c2a11"
NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
HASHER = FakePasswordHasher()

REGISTERED = UserRegistered(
    aggregate_id=USER_ID,
    occurred_at=NOW,
    email="alice@acme.io",
    hashed_password="fake$correct horse battery",
    display_name="Alice",
    date_of_birth=date(1990, 6, 1),
)


def login(password: str):
    def action(user: User) -> None:
        user.login(PlainPassword.from_string(password), HASHER, NOW)

    return action


async def test_given_events_are_not_reported_as_emitted():
    async with AggregateScenario(User) as scenario:
        scenario.given(REGISTERED).when(login("correct horse battery")).should_emit(
            UserLoggedIn
        ).should_have_state(lambda user: user.version == 2)


async def test_unmet_event_expectation_fails():
    with pytest.raises(AssertionError, match="should contain event of type UserRegistered"):
        async with AggregateScenario(User) as scenario:
            scenario.given(REGISTERED).when(login("correct horse battery")).should_emit(
                UserRegistered
            )


async def test_unmet_state_expectation_fails():
    with pytest.raises(AssertionError, match="should match state"):
        async with AggregateScenario(User) as scenario:
            scenario.given(REGISTERED).should_have_state(lambda user: user.version == 5)


async def test_unexpected_error_is_reraised():
    """Test that an action error fails the scenario unless it was expected."""
    with pytest.raises(CouldNotAuthenticate):
        async with AggregateScenario(User) as scenario:
            scenario.given(REGISTERED).when(login("wrong password")).should_emit_nothing()


async def test_expected_error_passes():
    async with AggregateScenario(User) as scenario:
        scenario.given(REGISTERED).when(login("wrong password")).should_raise(
            CouldNotAuthenticate
        )


async def test_errors_inside_block_propagate():
    with pytest.raises(RuntimeError, match="setup failed"):
        async with AggregateScenario(User):
            raise RuntimeError("setup failed")
