from datetime import date
from typing import ClassVar, Self

from pydantic import Field

from ...routing import applies_event
from ..aggregate import AggregateRoot
from ..event import DomainEvent
from ..events.ledger import (
    FeeAppliedToUnitLedgerEvent,
    PaymentReceivedOnUnitLedgerEvent,
    UnitLedgerAccountCreatedEvent,
)
from ..exceptions import CurrencyMismatchError, DomainRuleViolation, InvalidArgumentError
from ..money import Money
from ..values import FeeItemId, PaymentId, UnitId


class UnitLedgerAccount(AggregateRoot):
    """Running balance of what a unit owes the condominium.

    Fees increase the balance and payments decrease it. There is no
    overdraft rule: a unit that pays ahead simply carries a negative
    balance. The ledger account shares its id with its unit.
    """

    aggregate_type: ClassVar[str] = "UnitLedgerAccount"
    creation_event: ClassVar[type[DomainEvent]] = UnitLedgerAccountCreatedEvent

    id: UnitId | None = None
    balance: Money | None = None
    payment_ids: set[str] = Field(default_factory=set)

    @classmethod
    def create_new(cls, unit_id: UnitId, initial_balance: Money) -> Self:
        account = cls()
        account.emit(
            UnitLedgerAccountCreatedEvent(
                aggregate_id=str(unit_id),
                initial_balance_amount=initial_balance.amount,
                initial_balance_currency=initial_balance.currency.code,
            )
        )
        return account

    @property
    def unit_id(self) -> UnitId | None:
        return self.id

    def apply_fee(
        self, fee_item_id: FeeItemId, amount: Money, due_date: date, description: str
    ) -> None:
        aggregate_id = self._require_initialized()
        self._assert_ledger_currency(amount)
        self.emit(
            FeeAppliedToUnitLedgerEvent(
                aggregate_id=aggregate_id,
                fee_item_id=str(fee_item_id),
                amount_cents=amount.amount,
                currency_code=amount.currency.code,
                due_date=due_date,
                description=description,
            )
        )

    def receive_payment(
        self, amount: Money, payment_id: PaymentId, payment_date: date, payment_method: str
    ) -> None:
        aggregate_id = self._require_initialized()
        self._assert_ledger_currency(amount)
        if not payment_method.strip():
            raise InvalidArgumentError("Payment method cannot be empty.")
        if str(payment_id) in self.payment_ids:
            raise DomainRuleViolation(f"Payment {payment_id} was already received.")
        self.emit(
            PaymentReceivedOnUnitLedgerEvent(
                aggregate_id=aggregate_id,
                amount_cents=amount.amount,
                currency_code=amount.currency.code,
                payment_id=str(payment_id),
                payment_date=payment_date,
                payment_method=payment_method,
            )
        )

    def _assert_ledger_currency(self, amount: Money) -> None:
        if amount.currency != self.balance.currency:
            raise CurrencyMismatchError(self.balance.currency.code, amount.currency.code)

    @applies_event
    def when_created(self, event: UnitLedgerAccountCreatedEvent) -> None:
        self.id = UnitId(event.aggregate_id)
        self.balance = Money.of(event.initial_balance_amount, event.initial_balance_currency)

    @applies_event
    def when_fee_applied(self, event: FeeAppliedToUnitLedgerEvent) -> None:
        self.balance = self.balance.add(Money.of(event.amount_cents, event.currency_code))

    @applies_event
    def when_payment_received(self, event: PaymentReceivedOnUnitLedgerEvent) -> None:
        self.balance = self.balance.subtract(Money.of(event.amount_cents, event.currency_code))
        self.payment_ids.add(event.payment_id)
