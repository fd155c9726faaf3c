import logging
from collections.abc import Sequence

from ...domain.event import DomainEvent
from ...domain.exceptions import ProjectionError, ProjectionFailure
from ..events.store import EventStore, StoredEvent
from .projector import Projector
from .read_models import ReadModelStore

LOGGER = logging.getLogger(__name__)


class ProjectionManager:
    """Runs stored events through every projector that supports them.

    A batch is projected inside one read-model transaction. When a
    projector fails, the remaining projectors still run so that every
    failure of the batch is reported together; the batch then raises
    ``ProjectionError`` and its read-model writes are rolled back.

    Args:
        projectors: Projectors to run, in order.
        store: Read-model store the projectors write to.
    """

    def __init__(self, projectors: Sequence[Projector], store: ReadModelStore):
        self.projectors = list(projectors)
        self.store = store

    def supports(self, event: DomainEvent) -> bool:
        return any(projector.supports(event) for projector in self.projectors)

    async def project(self, stored_events: Sequence[StoredEvent]) -> None:
        """Project a batch of stored events.

        Raises:
            ProjectionError: If any projector failed on any event of the batch.
        """
        if not stored_events:
            return
        async with self.store.transaction():
            failures: list[ProjectionFailure] = []
            for stored in stored_events:
                for projector in self.projectors:
                    if not projector.supports(stored.event):
                        continue
                    try:
                        await projector.project(stored)
                    except Exception as e:
                        LOGGER.error(
                            "Projection failed",
                            exc_info=True,
                            extra={
                                "projector": projector.name,
                                "event_id": stored.event_id,
                                "event_type": stored.event.event_name,
                                "position": stored.position,
                            },
                        )
                        failures.append(
                            ProjectionFailure(
                                projector=projector.name,
                                event_id=stored.event_id,
                                event_type=stored.event.event_name,
                                position=stored.position,
                                error=e,
                            )
                        )
            if failures:
                raise ProjectionError(failures)

    async def replay(
        self,
        event_store: EventStore,
        from_position: int = 1,
        to_position: int | None = None,
        batch_size: int = 500,
    ) -> int:
        """Re-project stored events in global order.

        Projectors are idempotent, so replaying a range that was already
        projected leaves the read models unchanged. To rebuild from
        scratch, clear the read-model store first.

        Returns:
            The number of events replayed.
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        replayed = 0
        position = from_position
        while True:
            batch = await event_store.load_range(position, to_position, limit=batch_size)
            if not batch:
                break
            await self.project(batch)
            replayed += len(batch)
            position = batch[-1].position + 1
            LOGGER.info(
                "Replayed projection batch",
                extra={"count": len(batch), "last_position": batch[-1].position},
            )
        return replayed
