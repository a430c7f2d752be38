from abc import ABC, abstractmethod
from datetime import datetime

from .event import utc_now


class Clock(ABC):
    """Source of the current time.

    Aggregates and handlers receive "now" from a Clock instead of reading
    the system time, so time-dependent rules can be tested with a frozen
    clock.
    """

    __slots__ = ()

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time in UTC."""
        ...


class SystemClock(Clock):
    """Clock backed by the system time, always in UTC."""

    __slots__ = ()

    def now(self) -> datetime:
        return utc_now()
