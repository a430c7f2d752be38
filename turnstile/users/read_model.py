"""Read side of the user domain.

The read model is a projection of user events into a view that can be
queried by email. It is maintained by a listener attached to a
DispatchingEventStore and can be rebuilt at any time by replaying streams,
so every update is an idempotent upsert.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel, Field

from ..application import EventListener
from ..domain import DomainEvent
from .events import UserLoggedIn, UserRegistered
from .values import Email


class UserView(BaseModel):
    """Queryable snapshot of a user."""

    user_id: str
    email: str
    display_name: str
    registered_at: datetime
    last_login_at: datetime | None = Field(default=None)


class UserReadModel(ABC):
    """Port for querying the user projection."""

    @abstractmethod
    async def exists_with_email(self, email: Email) -> bool:
        """Check whether a user is registered with this email."""
        ...

    @abstractmethod
    async def find_user_id_by_email(self, email: Email) -> str | None:
        """Find the ID of the user registered with this email, if any."""
        ...

    @abstractmethod
    async def get(self, user_id: str) -> UserView | None:
        """Load the view of a user, if projected."""
        ...


class UserProjection(EventListener):
    """Listener that routes user events to projection updates.

    Events of other aggregates are ignored, so a projection can share a
    DispatchingEventStore with unrelated listeners and streams.
    """

    async def handle(self, event: DomainEvent) -> None:
        match event:
            case UserRegistered():
                await self.on_user_registered(event)
            case UserLoggedIn():
                await self.on_user_logged_in(event)
            case _:
                pass

    @abstractmethod
    async def on_user_registered(self, event: UserRegistered) -> None: ...

    @abstractmethod
    async def on_user_logged_in(self, event: UserLoggedIn) -> None: ...


class InMemoryUserReadModel(UserProjection, UserReadModel):
    """Dictionary-backed projection and read model for tests and development."""

    def __init__(self) -> None:
        self.users: dict[str, UserView] = {}

    async def on_user_registered(self, event: UserRegistered) -> None:
        existing = self.users.get(event.aggregate_id)
        self.users[event.aggregate_id] = UserView(
            user_id=event.aggregate_id,
            email=event.email,
            display_name=event.display_name,
            registered_at=event.occurred_at,
            last_login_at=existing.last_login_at if existing else None,
        )

    async def on_user_logged_in(self, event: UserLoggedIn) -> None:
        view = self.users.get(event.aggregate_id)
        if view is None:
            return
        if view.last_login_at is None or event.occurred_at > view.last_login_at:
            self.users[event.aggregate_id] = view.model_copy(
                update={"last_login_at": event.occurred_at}
            )

    async def exists_with_email(self, email: Email) -> bool:
        return await self.find_user_id_by_email(email) is not None

    async def find_user_id_by_email(self, email: Email) -> str | None:
        for view in self.users.values():
            if view.email == str(email):
                return view.user_id
        return None

    async def get(self, user_id: str) -> UserView | None:
        return self.users.get(user_id)
