"""MongoDB configuration using pydantic-settings."""

from functools import cached_property
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.asynchronous.mongo_client import AsyncMongoClient


class MongoConfiguration(BaseSettings):
    """Configuration and factory for MongoDB resources.

    All settings can be configured via environment variables with the
    TURNSTILE_MONGO_ prefix. For example:
    - TURNSTILE_MONGO_URI=mongodb://localhost:27017
    - TURNSTILE_MONGO_DATABASE=accounts
    - TURNSTILE_MONGO_USE_TRANSACTIONS=false

    The configuration also acts as a factory, providing lazy-initialized
    properties for the MongoDB client, database, and collections. The client
    is created timezone-aware, so datetimes read back are UTC-aware.

    Attributes:
        uri: MongoDB connection URI.
        database: Database name to use.
        events_collection: Collection name for event streams.
        users_collection: Collection name for the user read model.
        use_transactions: Append batches inside multi-document transactions.
            Requires a replica set or sharded cluster. When disabled, only
            single-event appends are accepted.
        server_selection_timeout_ms: How long to wait for a usable server
            before an operation fails.

    Example:
        >>> config = MongoConfiguration(database="accounts")
        >>> store = MongoEventStore(config, EventCodec(*USER_EVENTS))
        >>> ...
        >>> await config.on_shutdown()
    """

    uri: str = "mongodb://localhost:27017"
    database: str = "turnstile"

    # Collection names (configurable with sensible defaults)
    events_collection: str = "events"
    users_collection: str = "users"

    use_transactions: bool = True
    server_selection_timeout_ms: int = 30_000

    model_config = SettingsConfigDict(env_prefix="TURNSTILE_MONGO_")

    @cached_property
    def client(self) -> AsyncMongoClient[dict[str, Any]]:
        """Get the MongoDB async client.

        The client is lazily created and cached for reuse.
        """
        return AsyncMongoClient(
            self.uri,
            tz_aware=True,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
        )

    @cached_property
    def db(self) -> AsyncDatabase[dict[str, Any]]:
        """Get the MongoDB async database."""
        return self.client[self.database]

    @cached_property
    def events(self) -> AsyncCollection[dict[str, Any]]:
        """Get the events collection."""
        return self.db[self.events_collection]

    @cached_property
    def users(self) -> AsyncCollection[dict[str, Any]]:
        """Get the users read model collection."""
        return self.db[self.users_collection]

    async def on_startup(self) -> None:
        """Called when the application starts.

        No-op for MongoDB - connections are established lazily.
        """
        pass

    async def on_shutdown(self) -> None:
        """Called when the application shuts down.

        Closes the MongoDB client connection if it was created.
        """
        if "client" in self.__dict__:
            await self.client.close()
