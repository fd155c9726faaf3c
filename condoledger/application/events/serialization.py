"""Conversion between domain events and their persisted form."""

from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from ...domain.event import DomainEvent
from ...domain.exceptions import DeserializationError, UnknownEventTypeError
from .upcasting import UpcasterChain


class SerializedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: str
    aggregate_type: str
    schema_version: int
    payload: dict[str, Any]


class EventTypeMap(Mapping[str, type[DomainEvent]]):
    """Immutable table from persisted event type names to event classes.

    Built once and injected into the deserializer; two classes sharing an
    event name is a programming error and is rejected at construction.

    Example:
        >>> types = EventTypeMap.of(UnitCreatedEvent, OwnerAssignedToUnitEvent)
        >>> types.resolve("UnitCreated")
        <class '...UnitCreatedEvent'>
    """

    __slots__ = ("_types",)

    @staticmethod
    def of(*event_classes: type[DomainEvent]) -> "EventTypeMap":
        return EventTypeMap(event_classes)

    def __init__(self, event_classes: "tuple[type[DomainEvent], ...] | list[type[DomainEvent]]"):
        types: dict[str, type[DomainEvent]] = {}
        for event_class in event_classes:
            name = event_class.event_name
            if name in types and types[name] is not event_class:
                raise ValueError(
                    f"Event type {name!r} is registered by both "
                    f"{types[name].__name__} and {event_class.__name__}"
                )
            types[name] = event_class
        self._types = types

    def __getitem__(self, event_type: str) -> type[DomainEvent]:
        return self._types[event_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def resolve(self, event_type: str) -> type[DomainEvent]:
        try:
            return self._types[event_type]
        except KeyError:
            raise UnknownEventTypeError(event_type) from None


class EventSerializer:
    def serialize(self, event: DomainEvent) -> SerializedEvent:
        return SerializedEvent(
            event_type=event.event_name,
            aggregate_type=event.aggregate_type,
            schema_version=event.schema_version,
            payload=event.to_primitives(),
        )


class EventDeserializer:
    """Rebuilds domain events from persisted parts.

    Args:
        event_types: Table of known event classes.
        upcasters: Chain applied to payloads written with an older
            schema version than the event class declares.
    """

    def __init__(self, event_types: EventTypeMap, upcasters: UpcasterChain | None = None):
        self.event_types = event_types
        self.upcasters = upcasters or UpcasterChain()

    def deserialize(
        self,
        event_type: str,
        aggregate_type: str,
        payload: dict[str, Any],
        event_id: str,
        aggregate_id: str,
        occurred_on: datetime,
        schema_version: int = 1,
    ) -> DomainEvent:
        """Rebuild a domain event.

        Raises:
            UnknownEventTypeError: If the event type is not registered.
            DeserializationError: If the record belongs to another aggregate
                type or its payload cannot be read.
        """
        event_class = self.event_types.resolve(event_type)
        if event_class.aggregate_type != aggregate_type:
            raise DeserializationError(
                f"Event {event_id} of type {event_type} is stored for aggregate type "
                f"{aggregate_type}, expected {event_class.aggregate_type}"
            )
        if schema_version != event_class.schema_version:
            payload = self.upcasters.upcast(
                event_type, payload, schema_version, event_class.schema_version
            )
        return event_class.from_primitives(aggregate_id, payload, event_id, occurred_on)
