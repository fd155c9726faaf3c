from typing import ClassVar, Generic, TypeVar

from ...domain.aggregate import AggregateRoot
from ...domain.aggregates import (
    Account,
    Condominium,
    Expense,
    ExpenseCategory,
    FeeItem,
    Owner,
    Unit,
    UnitLedgerAccount,
)
from ...domain.exceptions import AggregateNotFoundError
from ...domain.values import Identifier, UnitId
from ..events.store import EventStore, StoredEvent
from ..projections.manager import ProjectionManager

A = TypeVar("A", bound=AggregateRoot)


class EventSourcedRepository(Generic[A]):
    """Loads aggregates from their event streams and saves their new events.

    ``save`` pulls the aggregate's pending events, appends them with the
    version the aggregate was loaded at as the expected version, and
    projects exactly the stored events, all in one event-store
    transaction. A concurrent writer that got there first makes the
    append fail with ``ConcurrencyError`` and nothing is persisted or
    projected.

    Subclasses only set ``aggregate_type``.
    """

    aggregate_type: ClassVar[type[AggregateRoot]]

    __slots__ = ("event_store", "projections")

    def __init__(self, event_store: EventStore, projections: ProjectionManager | None = None):
        self.event_store = event_store
        self.projections = projections

    async def find_by_id(self, aggregate_id: Identifier | str) -> A | None:
        history = await self.event_store.get_events_for_aggregate(
            str(aggregate_id), self.aggregate_type.aggregate_type
        )
        if not history:
            return None
        return self.aggregate_type.reconstitute_from_history(history)  # type: ignore[return-value]

    async def get(self, aggregate_id: Identifier | str) -> A:
        """Like ``find_by_id`` but raises ``AggregateNotFoundError`` when missing."""
        aggregate = await self.find_by_id(aggregate_id)
        if aggregate is None:
            raise AggregateNotFoundError(self.aggregate_type.aggregate_type, aggregate_id)
        return aggregate

    async def save(self, aggregate: A) -> list[StoredEvent]:
        expected_version = aggregate.persisted_version
        events = aggregate.pull_domain_events()
        if not events:
            return []

        async with self.event_store.transaction():
            stored = await self.event_store.append(
                events, expected_versions={aggregate.aggregate_id: expected_version}
            )
            if self.projections is not None:
                await self.projections.project(stored)
        return stored


class AccountRepository(EventSourcedRepository[Account]):
    aggregate_type = Account


class CondominiumRepository(EventSourcedRepository[Condominium]):
    aggregate_type = Condominium


class UnitRepository(EventSourcedRepository[Unit]):
    aggregate_type = Unit


class OwnerRepository(EventSourcedRepository[Owner]):
    aggregate_type = Owner


class UnitLedgerAccountRepository(EventSourcedRepository[UnitLedgerAccount]):
    aggregate_type = UnitLedgerAccount

    async def find_by_unit_id(self, unit_id: UnitId | str) -> UnitLedgerAccount | None:
        return await self.find_by_id(unit_id)


class ExpenseRepository(EventSourcedRepository[Expense]):
    aggregate_type = Expense


class FeeItemRepository(EventSourcedRepository[FeeItem]):
    aggregate_type = FeeItem


class ExpenseCategoryRepository(EventSourcedRepository[ExpenseCategory]):
    aggregate_type = ExpenseCategory
