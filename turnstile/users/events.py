"""Events of the User aggregate."""

from datetime import date
from typing import ClassVar

from pydantic import Field

from ..domain import DomainEvent


class UserRegistered(DomainEvent):
    """A user account was created."""

    event_type: ClassVar[str] = "user.registered"

    email: str = Field(description="Normalized email address")
    hashed_password: str = Field(repr=False, description="Password hash, never the plain password")
    display_name: str
    date_of_birth: date


class UserLoggedIn(DomainEvent):
    """A user authenticated successfully."""

    event_type: ClassVar[str] = "user.logged_in"


UserEvent = UserRegistered | UserLoggedIn
"""Closed set of events the User aggregate applies."""

USER_EVENTS: tuple[type[DomainEvent], ...] = (UserRegistered, UserLoggedIn)
