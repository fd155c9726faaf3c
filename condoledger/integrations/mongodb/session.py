"""Transaction scope shared by the MongoDB stores.

The event store and the read-model store open ``mongo_transaction`` with
the same client; whichever enters first starts the session and the other
joins it, so an append and the projection of its events commit or abort
together.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.mongo_client import AsyncMongoClient

_SESSION: ContextVar[AsyncClientSession | None] = ContextVar(
    "condoledger_mongo_session", default=None
)


def current_session() -> AsyncClientSession | None:
    return _SESSION.get()


@asynccontextmanager
async def mongo_transaction(
    client: AsyncMongoClient[dict[str, Any]], enabled: bool
) -> AsyncIterator[AsyncClientSession | None]:
    """Run the block in a MongoDB transaction, or join the one already open.

    With ``enabled`` false the block runs without a session and every
    write is applied as soon as it is made.
    """
    session = _SESSION.get()
    if session is not None or not enabled:
        yield session
        return

    async with client.start_session() as session:
        async with await session.start_transaction():
            token = _SESSION.set(session)
            try:
                yield session
            finally:
                _SESSION.reset(token)
