"""Caller-level retry of handlers that lose optimistic concurrency races."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from ..domain import ConcurrencyError

LOGGER = logging.getLogger(__name__)

C = TypeVar("C")
R = TypeVar("R")


class ConcurrencyRetry(Generic[C, R]):
    """Re-runs a handler when it fails due to a concurrency conflict.

    Event stores never retry on their own. A handler that loses a race has
    to start over from loading the aggregate, because its decision was made
    against stale state. ConcurrencyRetry wraps such a handler and runs the
    whole load-decide-append cycle again, up to ``max_attempts`` times.

    Attributes:
        max_attempts: The maximum number of attempts (initial + retries).
            For example, max_attempts=3 means 1 initial attempt + up to
            2 retries.
        retry_delay: The delay in seconds between attempts.

    Examples:
        >>> login = ConcurrencyRetry(LoginHandler(store, clock, hasher), max_attempts=3)
        >>> await login(Login(user_id=user_id, password="correct horse"))
    """

    __slots__ = ("handler", "max_attempts", "retry_delay")

    def __init__(
        self,
        handler: Callable[[C], Awaitable[R]],
        max_attempts: int,
        retry_delay: float = 0.0,
    ):
        """Initialize the retrying wrapper.

        Args:
            handler: The handler to run; must reload state on every call.
            max_attempts: Maximum number of attempts (must be positive).
            retry_delay: Delay in seconds between attempts (must be non-negative).

        Raises:
            ValueError: If max_attempts <= 0 or retry_delay < 0.
        """
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if retry_delay < 0:
            raise ValueError("retry_delay must be non-negative")
        self.handler = handler
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    async def __call__(self, command: C) -> R:
        """Run the handler, retrying on concurrency conflicts.

        Raises:
            ConcurrencyError: The last conflict, once all attempts have failed.
            Exception: Any other error is re-raised immediately.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self.handler(command)
            except ConcurrencyError as e:
                LOGGER.warning(
                    "Concurrency conflict, attempt %d/%d",
                    attempt,
                    self.max_attempts,
                    extra={
                        "aggregate_id": e.aggregate_id,
                        "aggregate_type": e.aggregate_type,
                        "expected_version": e.expected_version,
                        "current_version": e.current_version,
                    },
                )
                if attempt == self.max_attempts:
                    raise
                await asyncio.sleep(self.retry_delay)
        raise AssertionError("unreachable")
