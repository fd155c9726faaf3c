from datetime import date
from typing import ClassVar

from ..event import DomainEvent


class UnitLedgerAccountEvent(DomainEvent):
    aggregate_type: ClassVar[str] = "UnitLedgerAccount"


class UnitLedgerAccountCreatedEvent(UnitLedgerAccountEvent):
    event_name: ClassVar[str] = "UnitLedgerAccountCreated"

    initial_balance_amount: int
    initial_balance_currency: str


class FeeAppliedToUnitLedgerEvent(UnitLedgerAccountEvent):
    """A fee was charged to the unit; the balance grows by the amount."""

    event_name: ClassVar[str] = "FeeAppliedToUnitLedger"

    fee_item_id: str
    amount_cents: int
    currency_code: str
    due_date: date
    description: str


class PaymentReceivedOnUnitLedgerEvent(UnitLedgerAccountEvent):
    """A payment was received; the balance shrinks by the amount."""

    event_name: ClassVar[str] = "PaymentReceivedOnUnitLedger"

    amount_cents: int
    currency_code: str
    payment_id: str
    payment_date: date
    payment_method: str
