"""Projector base class for building read-model tables from events."""

import inspect
from typing import TYPE_CHECKING, ClassVar

from ...domain.event import DomainEvent
from ...routing import setup_event_handling
from ..events.store import StoredEvent
from .read_models import ReadModelStore, Row

if TYPE_CHECKING:
    from ...routing import MessageRouter


class MissingReadModelError(LookupError):
    """A projector was asked to update a row that was never created."""


class ReadModelConflictError(ValueError):
    """A row keyed by a natural key already holds another event's data."""


class Projector:
    """Maintains one read-model table from the events it handles.

    Subclass Projector, set ``table`` and declare handlers with
    ``@handles_event``. Handlers receive the event and the stream version
    it was stored at. Events the projector does not declare are ignored.

    Projection must be idempotent because replays redeliver events that
    were already projected. Rows keyed by aggregate keep the ``version``
    of the last event folded into them and skip anything at or below it
    (see ``is_stale``); rows keyed by event are plain upserts.

    Example:
        >>> class UnitProjector(Projector):
        ...     table = "units"
        ...
        ...     @handles_event
        ...     async def on_created(self, event: UnitCreatedEvent, version: int) -> None:
        ...         await self.store.upsert(self.table, event.aggregate_id, {...})
    """

    table: ClassVar[str]
    _event_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._event_router = setup_event_handling(cls)

    def __init__(self, store: ReadModelStore):
        self.store = store

    @property
    def name(self) -> str:
        return type(self).__name__

    def supports(self, event: DomainEvent) -> bool:
        return self._event_router.handles(type(event))

    async def project(self, stored: StoredEvent) -> None:
        result = self._event_router.route(self, stored.event, stored.version)
        if inspect.iscoroutine(result):
            await result

    @staticmethod
    def is_stale(row: Row | None, version: int) -> bool:
        return row is not None and row.get("version", 0) >= version

    async def existing_row(self, key: str, event: DomainEvent) -> Row:
        row = await self.store.get(self.table, key)
        if row is None:
            raise MissingReadModelError(
                f"{self.table} has no row {key} to apply {event.event_name} {event.event_id} to"
            )
        return row
