from datetime import datetime, timezone
from typing import Any, ClassVar, Self
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import DeserializationError


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Used as default_factory for DomainEvent.occurred_on so that every
    event is stamped in UTC regardless of the system timezone.
    """
    return datetime.now(tz=timezone.utc)


def new_event_id() -> str:
    return str(uuid4())


class DomainEvent(BaseModel):
    """Immutable fact recorded by an aggregate.

    Concrete events declare their payload as ordinary pydantic fields and
    set three class-level names:

    - ``event_name``: the stable type name persisted as ``event_type``
    - ``aggregate_type``: the name of the aggregate that emits it
    - ``schema_version``: the payload schema version (bump it and register
      an upcaster when the payload shape changes)

    Persisted payloads are flat dictionaries of JSON primitives with
    camelCase keys. ``to_primitives`` builds that dictionary and
    ``from_primitives`` reverses it; the two must round-trip exactly.
    Subclasses whose payload keys are not simply the camelCase form of
    their field names override ``payload_from_fields`` and
    ``fields_from_payload``.

    Attributes:
        aggregate_id: Id of the aggregate that recorded the event.
        event_id: Unique id (UUID4) of this event.
        occurred_on: When the event occurred (UTC).
    """

    model_config = ConfigDict(frozen=True)

    event_name: ClassVar[str]
    aggregate_type: ClassVar[str]
    schema_version: ClassVar[int] = 1

    aggregate_id: str
    event_id: str = Field(default_factory=new_event_id)
    occurred_on: datetime = Field(default_factory=utc_now)

    def to_primitives(self) -> dict[str, Any]:
        """Flat JSON-compatible payload of this event (metadata excluded)."""
        return self.payload_from_fields(
            self.model_dump(mode="json", exclude={"aggregate_id", "event_id", "occurred_on"})
        )

    @classmethod
    def from_primitives(
        cls,
        aggregate_id: str,
        payload: dict[str, Any],
        event_id: str,
        occurred_on: datetime,
    ) -> Self:
        """Rebuild an event from its persisted parts.

        Raises:
            DeserializationError: If the payload lacks a field or holds a
                value of the wrong shape.
        """
        try:
            fields = cls.fields_from_payload(payload)
            return cls(
                aggregate_id=aggregate_id,
                event_id=event_id,
                occurred_on=occurred_on,
                **fields,
            )
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise DeserializationError(
                f"Cannot deserialize {cls.event_name} {event_id}: {e}"
            ) from e

    @classmethod
    def payload_from_fields(cls, fields: dict[str, Any]) -> dict[str, Any]:
        return {_camel(name): value for name, value in fields.items()}

    @classmethod
    def fields_from_payload(cls, payload: dict[str, Any]) -> dict[str, Any]:
        payload_fields = [name for name in cls.model_fields if name not in _METADATA_FIELDS]
        return {name: payload[_camel(name)] for name in payload_fields}


_METADATA_FIELDS = frozenset({"aggregate_id", "event_id", "occurred_on"})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)
