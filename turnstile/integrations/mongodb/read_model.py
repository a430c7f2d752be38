"""MongoDB implementation of the user read model."""

from typing import Any

from ...users import Email, UserLoggedIn, UserProjection, UserReadModel, UserRegistered, UserView
from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration


class MongoUserReadModel(UserProjection, UserReadModel):
    """User projection stored in a MongoDB collection.

    One document per user, keyed by user ID (``_id``). Updates are upserts,
    so replaying a stream into the projection is harmless. A unique index on
    ``email`` guards against two users projecting the same address.
    """

    def __init__(self, config: MongoConfiguration):
        self._users = IndexedCollection(
            config.users,
            indexes=[
                IndexSpec(keys=[("email", IndexDirection.ASC)], unique=True, name="email_unique"),
            ],
        )

    async def on_user_registered(self, event: UserRegistered) -> None:
        await self._users.update_one(
            {"_id": event.aggregate_id},
            {
                "$set": {
                    "email": event.email,
                    "display_name": event.display_name,
                    "registered_at": event.occurred_at,
                },
                "$setOnInsert": {"last_login_at": None},
            },
            upsert=True,
        )

    async def on_user_logged_in(self, event: UserLoggedIn) -> None:
        # Only move last_login_at forward; replays of older logins are no-ops.
        await self._users.update_one(
            {
                "_id": event.aggregate_id,
                "$or": [
                    {"last_login_at": None},
                    {"last_login_at": {"$lt": event.occurred_at}},
                ],
            },
            {"$set": {"last_login_at": event.occurred_at}},
        )

    async def exists_with_email(self, email: Email) -> bool:
        return await self.find_user_id_by_email(email) is not None

    async def find_user_id_by_email(self, email: Email) -> str | None:
        doc = await self._users.find_one({"email": str(email)}, projection={"_id": 1})
        return str(doc["_id"]) if doc else None

    async def get(self, user_id: str) -> UserView | None:
        """Load the view of a user, if projected."""
        doc = await self._users.find_one({"_id": user_id})
        return _to_view(doc) if doc else None


def _to_view(doc: dict[str, Any]) -> UserView:
    return UserView(
        user_id=str(doc["_id"]),
        email=doc["email"],
        display_name=doc["display_name"],
        registered_at=doc["registered_at"],
        last_login_at=doc.get("last_login_at"),
    )
