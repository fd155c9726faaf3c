from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, Field

from ..routing import setup_event_applying
from .event import DomainEvent
from .exceptions import DomainRuleViolation, EventStreamError, InvalidArgumentError
from .values import Identifier

if TYPE_CHECKING:
    from ..routing import MessageRouter


class AggregateRoot(BaseModel):
    """Base class for event-sourced aggregates.

    An aggregate changes state only by applying events. Command methods
    validate their input, build an event and ``emit`` it, which applies
    the event and records it in the pending buffer. The repository later
    pulls the buffer with ``pull_domain_events`` and persists it.

    Appliers are declared with ``@applies_event`` and routed on the type
    annotation of their event parameter. Applying an event type the
    aggregate does not register raises ``UnrecognizedEventError``.

    Aggregates are rebuilt with ``reconstitute_from_history``, which goes
    through the blank constructor (every field defaulted) rather than
    the validated ``create_new`` factories, then applies the stored
    stream in order.

    Examples:
        >>> class Unit(AggregateRoot):
        ...     aggregate_type: ClassVar[str] = "Unit"
        ...     creation_event: ClassVar[type[DomainEvent]] = UnitCreatedEvent
        ...     id: UnitId | None = None
        ...     identifier: str = ""
        ...
        ...     @applies_event
        ...     def when_created(self, event: UnitCreatedEvent) -> None:
        ...         self.id = UnitId(event.aggregate_id)
        ...         self.identifier = event.identifier

    Attributes:
        id: Typed identifier; None until the creation event is applied.
        version: Number of events applied, persisted or not.
        pending_events: Events recorded but not yet pulled for persistence.
            Excluded from serialization.
    """

    aggregate_type: ClassVar[str]
    creation_event: ClassVar[type[DomainEvent]]

    id: Identifier | None = None
    version: int = 0
    pending_events: list[DomainEvent] = Field(default_factory=list, exclude=True)

    _event_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)  # type: ignore[arg-type]
        cls._event_router = setup_event_applying(cls)

    @property
    def aggregate_id(self) -> str | None:
        return str(self.id) if self.id is not None else None

    @property
    def persisted_version(self) -> int:
        """Version of the stream as last loaded from or saved to the store."""
        return self.version - len(self.pending_events)

    def apply(self, event: DomainEvent) -> None:
        """Route an event to its applier and advance the version.

        Raises:
            UnrecognizedEventError: If no applier is registered for the event type.
            EventStreamError: If the event belongs to another aggregate.
        """
        if self.id is not None and event.aggregate_id != str(self.id):
            raise EventStreamError(
                f"{type(event).__name__} for aggregate {event.aggregate_id} cannot be "
                f"applied to {self.aggregate_type} {self.id}"
            )
        self._event_router.route(self, event)
        self.version += 1

    def record_event(self, event: DomainEvent) -> None:
        self.pending_events.append(event)

    def emit(self, event: DomainEvent) -> None:
        self.apply(event)
        self.record_event(event)

    def pull_domain_events(self) -> list[DomainEvent]:
        """Return the pending events, oldest first, and clear the buffer."""
        events = list(self.pending_events)
        self.pending_events.clear()
        return events

    @classmethod
    def reconstitute_from_history(cls, events: list[DomainEvent]) -> Self:
        """Rebuild an aggregate from its ordered event stream.

        Raises:
            InvalidArgumentError: If the history is empty.
            EventStreamError: If the stream does not start with the
                aggregate's creation event.
        """
        if not events:
            raise InvalidArgumentError(
                f"Cannot reconstitute {cls.aggregate_type} from an empty event history."
            )
        if not isinstance(events[0], cls.creation_event):
            raise EventStreamError(
                f"{cls.aggregate_type} stream must start with {cls.creation_event.event_name}, "
                f"got {type(events[0]).__name__}"
            )
        aggregate = cls()
        for event in events:
            aggregate.apply(event)
        aggregate.pending_events.clear()
        return aggregate

    def _require_initialized(self) -> str:
        if self.id is None:
            raise DomainRuleViolation(
                f"{self.aggregate_type} has not been created; no creation event was applied."
            )
        return str(self.id)
