"""The table of every event type the ledger persists."""

from ...domain.events import (
    AccountCreated,
    CondominiumAddressChangedEvent,
    CondominiumRegisteredEvent,
    CondominiumRenamedEvent,
    ExpenseCategoryCreatedEvent,
    ExpenseRecordedEvent,
    FeeAppliedToUnitLedgerEvent,
    FeeItemCreatedEvent,
    MoneyDeposited,
    MoneyWithdrawn,
    OwnerAssignedToUnitEvent,
    OwnerContactInfoUpdatedEvent,
    OwnerCreatedEvent,
    OwnerRemovedFromUnitEvent,
    PaymentReceivedOnUnitLedgerEvent,
    UnitCreatedEvent,
    UnitLedgerAccountCreatedEvent,
    WithdrawalFailedDueToInsufficientFunds,
)
from .serialization import EventTypeMap

LEDGER_EVENT_TYPES = EventTypeMap.of(
    AccountCreated,
    MoneyDeposited,
    MoneyWithdrawn,
    WithdrawalFailedDueToInsufficientFunds,
    UnitLedgerAccountCreatedEvent,
    FeeAppliedToUnitLedgerEvent,
    PaymentReceivedOnUnitLedgerEvent,
    CondominiumRegisteredEvent,
    CondominiumRenamedEvent,
    CondominiumAddressChangedEvent,
    UnitCreatedEvent,
    OwnerAssignedToUnitEvent,
    OwnerRemovedFromUnitEvent,
    OwnerCreatedEvent,
    OwnerContactInfoUpdatedEvent,
    ExpenseRecordedEvent,
    FeeItemCreatedEvent,
    ExpenseCategoryCreatedEvent,
)
