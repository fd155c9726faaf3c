"""MongoDB implementation of EventStore.

Events are stored one document per event in the events collection:

    {
        "event_id": "...",
        "aggregate_type": "UnitLedgerAccount",
        "aggregate_id": "...",
        "version": 3,
        "position": 41,
        "event_type": "PaymentReceivedOnUnitLedger",
        "schema_version": 1,
        "payload": {...},
        "occurred_on": ISODate(...)
    }

Global positions are handed out by a counter document in the counters
collection. Unique indexes on ``event_id``, on
``(aggregate_type, aggregate_id, version)`` and on ``position`` are the
last line of defence: two writers racing on one stream both pass the
version check, and the loser's insert fails on the stream index.
"""

import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from pymongo import ReturnDocument
from pymongo.errors import BulkWriteError, DuplicateKeyError, PyMongoError

from ...application.events.registry import LEDGER_EVENT_TYPES
from ...application.events.serialization import EventDeserializer, EventSerializer
from ...application.events.store import (
    EventRecord,
    EventStore,
    StoredEvent,
    check_expected_version,
    stream_types,
)
from ...domain.event import DomainEvent
from ...domain.exceptions import ConcurrencyError, LedgerError, StorageError
from .config import MongoConfiguration
from .indexes import EVENT_INDEXES
from .session import current_session, mongo_transaction

LOGGER = logging.getLogger(__name__)

POSITION_COUNTER = "event_position"


def translate_error(error: PyMongoError) -> LedgerError:
    """Map a driver error to the ledger's exception hierarchy.

    Duplicate stream versions and transient transaction conflicts mean
    another writer got there first; everything else is a storage failure.
    """
    if isinstance(error, (BulkWriteError, DuplicateKeyError)):
        if "version" in _duplicate_key_fields(error):
            return ConcurrencyError(f"Stream was appended to concurrently: {error}")
        return StorageError(f"Duplicate key: {error}")
    if error.has_error_label("TransientTransactionError"):
        return ConcurrencyError(f"Transaction conflict: {error}")
    return StorageError(f"MongoDB operation failed: {error}")


def _duplicate_key_fields(error: BulkWriteError | DuplicateKeyError) -> set[str]:
    details: Any = error.details or {}
    if isinstance(error, BulkWriteError):
        write_errors = details.get("writeErrors") or [{}]
        details = write_errors[0]
    key_pattern = details.get("keyPattern")
    if key_pattern:
        return set(key_pattern)
    # Older servers only name the index in the message
    message = str(details.get("errmsg", error))
    return {"version"} if "version" in message else set()


class MongoEventStore(EventStore):
    """MongoDB-backed event store.

    With ``use_transactions`` enabled an append joins (or opens) the
    MongoDB transaction of ``transaction()``, so a save and the
    projection of its events commit together. Without transactions each
    append is written immediately as one ordered ``insert_many``. When
    that insert fails part way, the documents it already wrote are
    deleted again before the error is raised, so the log never keeps
    half an append. Their reserved positions stay unused. A projection
    that fails after such an append has committed is not undone; replay
    the projections to repair the read models.

    Examples:
        >>> config = MongoConfiguration(uri="mongodb://localhost:27017")
        >>> store = MongoEventStore(config)
        >>> await store.initialize_schema()
    """

    def __init__(
        self,
        config: MongoConfiguration,
        serializer: EventSerializer | None = None,
        deserializer: EventDeserializer | None = None,
    ):
        self.config = config
        self.serializer = serializer or EventSerializer()
        self.deserializer = deserializer or EventDeserializer(LEDGER_EVENT_TYPES)

    async def initialize_schema(self) -> None:
        """Create the event log indexes. Safe to call repeatedly."""
        try:
            for spec in EVENT_INDEXES:
                await spec.apply(self.config.events)
        except PyMongoError as e:
            raise translate_error(e) from e

    async def on_startup(self) -> None:
        await self.initialize_schema()

    async def on_shutdown(self) -> None:
        pass

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            async with mongo_transaction(self.config.client, self.config.use_transactions):
                yield
        except PyMongoError as e:
            raise translate_error(e) from e

    async def append(
        self,
        events: Sequence[DomainEvent],
        expected_versions: Mapping[str, int] | None = None,
    ) -> list[StoredEvent]:
        if not events:
            return []
        types = stream_types(events)
        expected_versions = expected_versions or {}

        async with self.transaction():
            session = current_session()
            versions: dict[str, int] = {}
            for aggregate_id, aggregate_type in types.items():
                versions[aggregate_id] = await self.current_version(aggregate_id, aggregate_type)
                check_expected_version(
                    aggregate_id, expected_versions.get(aggregate_id), versions[aggregate_id]
                )

            position = await self._reserve_positions(len(events))
            documents: list[dict[str, Any]] = []
            stored: list[StoredEvent] = []
            for event in events:
                versions[event.aggregate_id] += 1
                position += 1
                record = self._to_record(event, versions[event.aggregate_id], position)
                documents.append(record.model_dump())
                stored.append(
                    StoredEvent(event=event, version=record.version, position=record.position)
                )

            try:
                await self.config.events.insert_many(documents, ordered=True, session=session)
            except PyMongoError:
                if session is None:
                    await self._discard(documents)
                raise

        LOGGER.debug(
            "Appended events",
            extra={"count": len(stored), "last_position": stored[-1].position},
        )
        return stored

    async def load_stream(
        self, aggregate_id: str, aggregate_type: str | None = None
    ) -> list[StoredEvent]:
        filter: dict[str, Any] = {"aggregate_id": aggregate_id}
        if aggregate_type is not None:
            filter["aggregate_type"] = aggregate_type
        return await self._find(filter, sort=[("aggregate_type", 1), ("version", 1)])

    async def current_version(self, aggregate_id: str, aggregate_type: str) -> int:
        try:
            document = await self.config.events.find_one(
                {"aggregate_type": aggregate_type, "aggregate_id": aggregate_id},
                projection={"version": True},
                sort=[("version", -1)],
                session=current_session(),
            )
        except PyMongoError as e:
            raise translate_error(e) from e
        return document["version"] if document else 0

    async def load_range(
        self,
        from_position: int = 1,
        to_position: int | None = None,
        limit: int | None = None,
    ) -> list[StoredEvent]:
        bounds: dict[str, int] = {"$gte": from_position}
        if to_position is not None:
            bounds["$lte"] = to_position
        return await self._find({"position": bounds}, sort=[("position", 1)], limit=limit)

    async def _find(
        self,
        filter: dict[str, Any],
        sort: list[tuple[str, int]],
        limit: int | None = None,
    ) -> list[StoredEvent]:
        try:
            cursor = self.config.events.find(filter, session=current_session()).sort(sort)
            if limit:
                cursor = cursor.limit(limit)
            records = [EventRecord.model_validate(document) async for document in cursor]
        except PyMongoError as e:
            raise translate_error(e) from e
        return [self._to_stored(record) for record in records]

    async def _discard(self, documents: list[dict[str, Any]]) -> None:
        """Delete whatever part of a failed append reached the log.

        Positions are reserved per append, so they only match this
        append's own documents.
        """
        positions = [document["position"] for document in documents]
        try:
            result = await self.config.events.delete_many({"position": {"$in": positions}})
        except PyMongoError:
            LOGGER.exception("Failed to remove a partial append", extra={"positions": positions})
            return
        if result.deleted_count:
            LOGGER.warning(
                "Removed a partial append",
                extra={"deleted": result.deleted_count, "positions": positions},
            )

    async def _reserve_positions(self, count: int) -> int:
        """Reserve ``count`` positions and return the one before the first."""
        counter = await self.config.counters.find_one_and_update(
            {"_id": POSITION_COUNTER},
            {"$inc": {"value": count}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
            session=current_session(),
        )
        return counter["value"] - count

    def _to_record(self, event: DomainEvent, version: int, position: int) -> EventRecord:
        serialized = self.serializer.serialize(event)
        return EventRecord(
            event_id=event.event_id,
            aggregate_id=event.aggregate_id,
            aggregate_type=serialized.aggregate_type,
            event_type=serialized.event_type,
            schema_version=serialized.schema_version,
            payload=serialized.payload,
            version=version,
            position=position,
            occurred_on=event.occurred_on,
        )

    def _to_stored(self, record: EventRecord) -> StoredEvent:
        event = self.deserializer.deserialize(
            event_type=record.event_type,
            aggregate_type=record.aggregate_type,
            payload=record.payload,
            event_id=record.event_id,
            aggregate_id=record.aggregate_id,
            occurred_on=record.occurred_on,
            schema_version=record.schema_version,
        )
        return StoredEvent(event=event, version=record.version, position=record.position)
