"""Event store interfaces and the in-memory implementation."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from ...domain.event import DomainEvent
from ...domain.exceptions import ConcurrencyError, InvalidArgumentError, StorageError
from .registry import LEDGER_EVENT_TYPES
from .serialization import EventDeserializer, EventSerializer

LOGGER = logging.getLogger(__name__)


class EventRecord(BaseModel):
    """One persisted row of the event log.

    ``event_id`` is unique, ``(aggregate_type, aggregate_id, version)`` is
    unique and ``position`` (global append order) is unique.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str
    aggregate_id: str
    aggregate_type: str
    event_type: str
    schema_version: int
    payload: dict[str, Any]
    version: int
    position: int
    occurred_on: datetime


class StoredEvent(BaseModel):
    """A domain event together with where the store put it."""

    model_config = ConfigDict(frozen=True)

    event: DomainEvent
    version: int
    position: int

    @property
    def event_id(self) -> str:
        return self.event.event_id

    @property
    def aggregate_id(self) -> str:
        return self.event.aggregate_id


def stream_types(events: Sequence[DomainEvent]) -> dict[str, str]:
    """Map each aggregate id of an append to the aggregate type of its stream.

    Raises:
        InvalidArgumentError: If one append mixes aggregate types under one id.
    """
    types: dict[str, str] = {}
    for event in events:
        known = types.setdefault(event.aggregate_id, event.aggregate_type)
        if known != event.aggregate_type:
            raise InvalidArgumentError(
                f"One append cannot mix {known} and {event.aggregate_type} events "
                f"for aggregate {event.aggregate_id}"
            )
    return types


def check_expected_version(aggregate_id: str, expected: int | None, actual: int) -> None:
    if expected is not None and expected != actual:
        raise ConcurrencyError(
            f"Expected version {expected}, got {actual} for aggregate {aggregate_id}"
        )


class EventStore(ABC):
    """Abstract append-only log of domain events.

    A stream is identified by ``(aggregate_type, aggregate_id)``; a unit
    and its ledger account share an id but not a stream. Each stream is
    numbered from 1 (``version``) and every event also gets a global
    ``position`` used to replay projections.

    Appends are all-or-none per call. When ``expected_versions`` names an
    aggregate id, the append fails with ``ConcurrencyError`` unless the
    stream the events go to is exactly at that version, which gives
    optimistic concurrency to repositories.

    ``transaction()`` groups several appends (and whatever the caller does
    in between, such as projecting read models) into one unit: nothing is
    visible to other readers until the block exits without an exception.
    """

    @abstractmethod
    async def append(
        self,
        events: Sequence[DomainEvent],
        expected_versions: Mapping[str, int] | None = None,
    ) -> list[StoredEvent]:
        """Append events and return them with their assigned version and position.

        Raises:
            ConcurrencyError: If an expected version does not match.
            StorageError: If an event id is already stored or the backend fails.
        """
        ...

    @abstractmethod
    async def load_stream(
        self, aggregate_id: str, aggregate_type: str | None = None
    ) -> list[StoredEvent]:
        """Load a stream by version (empty if unknown).

        Without ``aggregate_type`` every event recorded under the id is
        returned, whatever stream it belongs to, ordered by aggregate
        type and then version.
        """
        ...

    @abstractmethod
    async def current_version(self, aggregate_id: str, aggregate_type: str) -> int:
        ...

    @abstractmethod
    async def load_range(
        self,
        from_position: int = 1,
        to_position: int | None = None,
        limit: int | None = None,
    ) -> list[StoredEvent]:
        """Load events with ``from_position <= position <= to_position`` in global order.

        Positions may have gaps; at most ``limit`` events are returned.
        """
        ...

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        ...

    async def get_events_for_aggregate(
        self, aggregate_id: str, aggregate_type: str | None = None
    ) -> list[DomainEvent]:
        return [stored.event for stored in await self.load_stream(aggregate_id, aggregate_type)]


class InMemoryEventStore(EventStore):
    """List-backed event store for tests and single-process use.

    Events are kept as serialized ``EventRecord`` rows and deserialized on
    read, so the in-memory path exercises the same round trip as a
    durable backend. Writers are serialized with an ``asyncio.Lock``; an
    append outside ``transaction()`` opens one for itself and an append
    inside it joins the open transaction.
    """

    def __init__(
        self,
        serializer: EventSerializer | None = None,
        deserializer: EventDeserializer | None = None,
    ):
        self.serializer = serializer or EventSerializer()
        self.deserializer = deserializer or EventDeserializer(LEDGER_EVENT_TYPES)
        self.records: list[EventRecord] = []
        self._lock = asyncio.Lock()
        self._pending: ContextVar[list[EventRecord] | None] = ContextVar(
            f"in_memory_event_store_{id(self)}", default=None
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._pending.get() is not None:
            yield
            return
        async with self._lock:
            buffer: list[EventRecord] = []
            token = self._pending.set(buffer)
            try:
                yield
                self.records.extend(buffer)
                if buffer:
                    LOGGER.debug(
                        "Committed events",
                        extra={"count": len(buffer), "last_position": buffer[-1].position},
                    )
            finally:
                self._pending.reset(token)

    async def append(
        self,
        events: Sequence[DomainEvent],
        expected_versions: Mapping[str, int] | None = None,
    ) -> list[StoredEvent]:
        if not events:
            return []
        buffer = self._pending.get()
        if buffer is None:
            async with self.transaction():
                return await self.append(events, expected_versions)

        types = stream_types(events)
        visible = self._visible_records()
        expected_versions = expected_versions or {}
        versions: dict[str, int] = {}
        for aggregate_id, aggregate_type in types.items():
            versions[aggregate_id] = self._version_of(aggregate_id, aggregate_type, visible)
            check_expected_version(
                aggregate_id, expected_versions.get(aggregate_id), versions[aggregate_id]
            )

        known_ids = {record.event_id for record in visible}
        position = max((record.position for record in visible), default=0)
        records: list[EventRecord] = []
        stored: list[StoredEvent] = []
        for event in events:
            if event.event_id in known_ids:
                raise StorageError(f"Event {event.event_id} is already stored")
            known_ids.add(event.event_id)
            versions[event.aggregate_id] += 1
            position += 1
            version = versions[event.aggregate_id]
            records.append(self._to_record(event, version, position))
            stored.append(StoredEvent(event=event, version=version, position=position))

        buffer.extend(records)
        return stored

    async def load_stream(
        self, aggregate_id: str, aggregate_type: str | None = None
    ) -> list[StoredEvent]:
        records = [
            record
            for record in self._visible_records()
            if record.aggregate_id == aggregate_id
            and (aggregate_type is None or record.aggregate_type == aggregate_type)
        ]
        records.sort(key=lambda record: (record.aggregate_type, record.version))
        return [self._to_stored(record) for record in records]

    async def current_version(self, aggregate_id: str, aggregate_type: str) -> int:
        return self._version_of(aggregate_id, aggregate_type, self._visible_records())

    async def load_range(
        self,
        from_position: int = 1,
        to_position: int | None = None,
        limit: int | None = None,
    ) -> list[StoredEvent]:
        records = [
            record
            for record in self._visible_records()
            if record.position >= from_position
            and (to_position is None or record.position <= to_position)
        ]
        if limit is not None:
            records = records[:limit]
        return [self._to_stored(record) for record in records]

    def _visible_records(self) -> list[EventRecord]:
        return self.records + (self._pending.get() or [])

    @staticmethod
    def _version_of(aggregate_id: str, aggregate_type: str, records: list[EventRecord]) -> int:
        return max(
            (
                record.version
                for record in records
                if record.aggregate_id == aggregate_id and record.aggregate_type == aggregate_type
            ),
            default=0,
        )

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
