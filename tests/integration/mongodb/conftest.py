"""Fixtures for MongoDB integration tests, backed by a testcontainers MongoDB."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from testcontainers.mongodb import MongoDbContainer

from condoledger.integrations.mongodb import (
    MongoConfiguration,
    MongoEventStore,
    MongoReadModelStore,
)


@pytest.fixture(scope="module")
def mongodb_container():
    """Start MongoDB container for tests."""
    container = MongoDbContainer("mongo:7")
    with container:
        yield container


@pytest_asyncio.fixture
async def mongo_config(
    mongodb_container, request: pytest.FixtureRequest
) -> AsyncIterator[MongoConfiguration]:
    """A configuration on a fresh database named after the test."""
    config = MongoConfiguration(
        uri=mongodb_container.get_connection_url(),
        database=f"test_{request.node.name}"[:63],
    )
    await config.client.drop_database(config.database)
    try:
        yield config
    finally:
        await config.on_shutdown()


@pytest_asyncio.fixture
async def mongo_event_store(mongo_config: MongoConfiguration) -> MongoEventStore:
    store = MongoEventStore(mongo_config)
    await store.initialize_schema()
    return store


@pytest_asyncio.fixture
async def mongo_read_models(mongo_config: MongoConfiguration) -> MongoReadModelStore:
    return MongoReadModelStore(mongo_config)
