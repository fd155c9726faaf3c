"""MongoDB configuration using pydantic-settings."""

from functools import cached_property
from typing import Any

from pydantic_settings import BaseSettings
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.asynchronous.mongo_client import AsyncMongoClient


class MongoConfiguration(BaseSettings):
    """Configuration and factory for MongoDB resources.

    All settings can be configured via environment variables with the
    CONDOLEDGER_MONGO_ prefix. For example:
    - CONDOLEDGER_MONGO_URI=mongodb://localhost:27017
    - CONDOLEDGER_MONGO_DATABASE=condominiums
    - CONDOLEDGER_MONGO_USE_TRANSACTIONS=true

    Attributes:
        uri: MongoDB connection URI.
        database: Database name to use.
        events_collection: Collection holding the event log.
        counters_collection: Collection holding the global position counter.
        read_model_prefix: Prefix of the read-model collections; the
            ``units`` table lives in ``<prefix>units``.
        use_transactions: Run each save in a multi-document transaction.
            Requires a replica set or a sharded cluster. Without it an
            append is still all or nothing, but the projection of its
            events is written separately afterwards.

    Example:
        >>> config = MongoConfiguration(database="condominiums")
        >>> async with LedgerApplication.with_mongodb(config) as app:
        ...     ...
    """

    # Connection settings
    uri: str = "mongodb://localhost:27017"
    database: str = "condoledger"

    # Collection names
    events_collection: str = "events"
    counters_collection: str = "counters"
    read_model_prefix: str = "rm_"

    use_transactions: bool = False

    model_config = {"env_prefix": "CONDOLEDGER_MONGO_"}

    @cached_property
    def client(self) -> AsyncMongoClient[dict[str, Any]]:
        """The MongoDB async client, created on first use.

        The client is timezone aware so stored datetimes come back in UTC.
        """
        return AsyncMongoClient(self.uri, tz_aware=True)

    @cached_property
    def db(self) -> AsyncDatabase[dict[str, Any]]:
        return self.client[self.database]

    @cached_property
    def events(self) -> AsyncCollection[dict[str, Any]]:
        return self.db[self.events_collection]

    @cached_property
    def counters(self) -> AsyncCollection[dict[str, Any]]:
        return self.db[self.counters_collection]

    def read_model(self, table: str) -> AsyncCollection[dict[str, Any]]:
        return self.db[f"{self.read_model_prefix}{table}"]

    async def on_startup(self) -> None:
        """No-op; connections are established lazily."""
        pass

    async def on_shutdown(self) -> None:
        """Close the client if it was created."""
        if "client" in self.__dict__:
            await self.client.close()
