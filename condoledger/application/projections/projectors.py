"""Projectors maintaining the ledger's read-model tables.

Dates are stored as ISO ``YYYY-MM-DD`` strings so that they sort and
compare correctly in every backend; timestamps are stored as datetimes.
"""

from ...domain.events import (
    CondominiumAddressChangedEvent,
    CondominiumRegisteredEvent,
    CondominiumRenamedEvent,
    ExpenseRecordedEvent,
    FeeAppliedToUnitLedgerEvent,
    OwnerAssignedToUnitEvent,
    OwnerContactInfoUpdatedEvent,
    OwnerCreatedEvent,
    OwnerRemovedFromUnitEvent,
    PaymentReceivedOnUnitLedgerEvent,
    UnitCreatedEvent,
    UnitLedgerAccountCreatedEvent,
)
from ...routing import handles_event
from .projector import Projector, ReadModelConflictError
from .read_models import ReadModelStore

CONDOMINIUMS = "condominiums"
OWNERS = "owners"
UNITS = "units"
UNIT_LEDGER_ACCOUNTS = "unit_ledger_accounts"
EXPENSES = "expenses"
FEES_ISSUED = "fees_issued"
PAYMENTS_RECEIVED = "payments_received"


class CondominiumProjector(Projector):
    table = CONDOMINIUMS

    @handles_event
    async def on_registered(self, event: CondominiumRegisteredEvent, version: int) -> None:
        if self.is_stale(await self.store.get(self.table, event.aggregate_id), version):
            return
        await self.store.upsert(
            self.table,
            event.aggregate_id,
            {
                "id": event.aggregate_id,
                "name": event.name,
                "address_street": event.address_street,
                "address_city": event.address_city,
                "address_postal_code": event.address_postal_code,
                "address_country": event.address_country,
                "created_at": event.occurred_on,
                "updated_at": event.occurred_on,
                "version": version,
            },
        )

    @handles_event
    async def on_renamed(self, event: CondominiumRenamedEvent, version: int) -> None:
        row = await self.existing_row(event.aggregate_id, event)
        if self.is_stale(row, version):
            return
        row.update(name=event.new_name, updated_at=event.occurred_on, version=version)
        await self.store.upsert(self.table, event.aggregate_id, row)

    @handles_event
    async def on_address_changed(
        self, event: CondominiumAddressChangedEvent, version: int
    ) -> None:
        row = await self.existing_row(event.aggregate_id, event)
        if self.is_stale(row, version):
            return
        row.update(
            address_street=event.new_address_street,
            address_city=event.new_address_city,
            address_postal_code=event.new_address_postal_code,
            address_country=event.new_address_country,
            updated_at=event.occurred_on,
            version=version,
        )
        await self.store.upsert(self.table, event.aggregate_id, row)


class OwnerProjector(Projector):
    table = OWNERS

    @handles_event
    async def on_created(self, event: OwnerCreatedEvent, version: int) -> None:
        if self.is_stale(await self.store.get(self.table, event.aggregate_id), version):
            return
        await self.store.upsert(
            self.table,
            event.aggregate_id,
            {
                "id": event.aggregate_id,
                "name": event.name,
                "email": event.email,
                "phone_number": event.phone_number,
                "created_at": event.occurred_on,
                "updated_at": event.occurred_on,
                "version": version,
            },
        )

    @handles_event
    async def on_contact_info_updated(
        self, event: OwnerContactInfoUpdatedEvent, version: int
    ) -> None:
        row = await self.existing_row(event.aggregate_id, event)
        if self.is_stale(row, version):
            return
        row.update(
            name=event.new_name,
            email=event.new_email,
            phone_number=event.new_phone_number,
            updated_at=event.occurred_on,
            version=version,
        )
        await self.store.upsert(self.table, event.aggregate_id, row)


class UnitProjector(Projector):
    table = UNITS

    @handles_event
    async def on_created(self, event: UnitCreatedEvent, version: int) -> None:
        if self.is_stale(await self.store.get(self.table, event.aggregate_id), version):
            return
        await self.store.upsert(
            self.table,
            event.aggregate_id,
            {
                "id": event.aggregate_id,
                "condominium_id": event.condominium_id,
                "identifier": event.identifier,
                "owner_id": None,
                "created_at": event.occurred_on,
                "updated_at": event.occurred_on,
                "version": version,
            },
        )

    @handles_event
    async def on_owner_assigned(self, event: OwnerAssignedToUnitEvent, version: int) -> None:
        await self._set_owner(event, event.owner_id, version)

    @handles_event
    async def on_owner_removed(self, event: OwnerRemovedFromUnitEvent, version: int) -> None:
        await self._set_owner(event, None, version)

    async def _set_owner(self, event, owner_id: str | None, version: int) -> None:
        row = await self.existing_row(event.aggregate_id, event)
        if self.is_stale(row, version):
            return
        row.update(owner_id=owner_id, updated_at=event.occurred_on, version=version)
        await self.store.upsert(self.table, event.aggregate_id, row)


class UnitLedgerAccountProjector(Projector):
    """Keeps the current balance of every unit ledger account."""

    table = UNIT_LEDGER_ACCOUNTS

    @handles_event
    async def on_created(self, event: UnitLedgerAccountCreatedEvent, version: int) -> None:
        if self.is_stale(await self.store.get(self.table, event.aggregate_id), version):
            return
        await self.store.upsert(
            self.table,
            event.aggregate_id,
            {
                "unit_id": event.aggregate_id,
                "balance_amount_cents": event.initial_balance_amount,
                "balance_currency_code": event.initial_balance_currency,
                "last_updated_at": event.occurred_on,
                "version": version,
            },
        )

    @handles_event
    async def on_fee_applied(self, event: FeeAppliedToUnitLedgerEvent, version: int) -> None:
        await self._adjust_balance(event, event.amount_cents, version)

    @handles_event
    async def on_payment_received(
        self, event: PaymentReceivedOnUnitLedgerEvent, version: int
    ) -> None:
        await self._adjust_balance(event, -event.amount_cents, version)

    async def _adjust_balance(self, event, delta: int, version: int) -> None:
        row = await self.existing_row(event.aggregate_id, event)
        if self.is_stale(row, version):
            return
        row.update(
            balance_amount_cents=row["balance_amount_cents"] + delta,
            last_updated_at=event.occurred_on,
            version=version,
        )
        await self.store.upsert(self.table, event.aggregate_id, row)


class ExpenseProjector(Projector):
    table = EXPENSES

    @handles_event
    async def on_recorded(self, event: ExpenseRecordedEvent, version: int) -> None:
        await self.store.upsert(
            self.table,
            event.aggregate_id,
            {
                "id": event.aggregate_id,
                "condominium_id": event.condominium_id,
                "expense_category_id": event.expense_category_id,
                "description": event.description,
                "amount_cents": event.amount_cents,
                "currency_code": event.currency_code,
                "expense_date": event.expense_date.isoformat(),
                "recorded_at": event.occurred_on,
            },
        )


class FeesIssuedProjector(Projector):
    """One row per fee applied to a unit, keyed by the fee event's id."""

    table = FEES_ISSUED

    @handles_event
    async def on_fee_applied(self, event: FeeAppliedToUnitLedgerEvent, version: int) -> None:
        await self.store.upsert(
            self.table,
            event.event_id,
            {
                "id": event.event_id,
                "unit_id": event.aggregate_id,
                "fee_item_id": event.fee_item_id,
                "description": event.description,
                "amount_cents": event.amount_cents,
                "currency_code": event.currency_code,
                "due_date": event.due_date.isoformat(),
                "issued_at": event.occurred_on,
                "status": "PENDING",
            },
        )


class PaymentsReceivedProjector(Projector):
    table = PAYMENTS_RECEIVED

    @handles_event
    async def on_payment_received(
        self, event: PaymentReceivedOnUnitLedgerEvent, version: int
    ) -> None:
        existing = await self.store.get(self.table, event.payment_id)
        if existing is not None and existing.get("event_id") != event.event_id:
            raise ReadModelConflictError(
                f"Payment {event.payment_id} is already recorded by event {existing.get('event_id')}"
            )
        await self.store.upsert(
            self.table,
            event.payment_id,
            {
                "id": event.payment_id,
                "event_id": event.event_id,
                "unit_id": event.aggregate_id,
                "amount_cents": event.amount_cents,
                "currency_code": event.currency_code,
                "payment_date": event.payment_date.isoformat(),
                "payment_method": event.payment_method,
                "received_at": event.occurred_on,
            },
        )


def ledger_projectors(store: ReadModelStore) -> list[Projector]:
    return [
        CondominiumProjector(store),
        OwnerProjector(store),
        UnitProjector(store),
        UnitLedgerAccountProjector(store),
        ExpenseProjector(store),
        FeesIssuedProjector(store),
        PaymentsReceivedProjector(store),
    ]
