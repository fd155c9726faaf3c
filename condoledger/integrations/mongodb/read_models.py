"""MongoDB implementation of ReadModelStore.

Each table is a collection named ``<read_model_prefix><table>``; a row is
stored as its columns plus ``_id`` set to the row key.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from pymongo.errors import PyMongoError

from ...application.projections.read_models import ReadModelStore, Row
from .config import MongoConfiguration
from .event_store import translate_error
from .session import current_session, mongo_transaction


class MongoReadModelStore(ReadModelStore):
    def __init__(self, config: MongoConfiguration):
        self.config = config

    async def get(self, table: str, key: str) -> Row | None:
        try:
            document = await self.config.read_model(table).find_one(
                {"_id": key}, session=current_session()
            )
        except PyMongoError as e:
            raise translate_error(e) from e
        return _to_row(document) if document is not None else None

    async def upsert(self, table: str, key: str, row: Row) -> None:
        try:
            await self.config.read_model(table).replace_one(
                {"_id": key}, {**row, "_id": key}, upsert=True, session=current_session()
            )
        except PyMongoError as e:
            raise translate_error(e) from e

    async def find(self, table: str, **filters: Any) -> list[Row]:
        try:
            cursor = self.config.read_model(table).find(filters, session=current_session())
            return [_to_row(document) async for document in cursor.sort("_id", 1)]
        except PyMongoError as e:
            raise translate_error(e) from e

    async def clear(self, *tables: str) -> None:
        """Drop the given tables, or every read-model table when none is named."""
        try:
            if not tables:
                names = await self.config.db.list_collection_names(
                    filter={"name": {"$regex": f"^{self.config.read_model_prefix}"}}
                )
                tables = tuple(name.removeprefix(self.config.read_model_prefix) for name in names)
            for table in tables:
                await self.config.read_model(table).drop()
        except PyMongoError as e:
            raise translate_error(e) from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            async with mongo_transaction(self.config.client, self.config.use_transactions):
                yield
        except PyMongoError as e:
            raise translate_error(e) from e


def _to_row(document: dict[str, Any]) -> Row:
    row = dict(document)
    row.pop("_id", None)
    return row
