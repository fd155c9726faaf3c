from .account import (
    AccountCreated,
    AccountEvent,
    MoneyDeposited,
    MoneyWithdrawn,
    WithdrawalFailedDueToInsufficientFunds,
)
from .catalog import ExpenseCategoryCreatedEvent, FeeItemCreatedEvent
from .condominium import (
    CondominiumAddressChangedEvent,
    CondominiumEvent,
    CondominiumRegisteredEvent,
    CondominiumRenamedEvent,
)
from .expense import ExpenseRecordedEvent
from .ledger import (
    FeeAppliedToUnitLedgerEvent,
    PaymentReceivedOnUnitLedgerEvent,
    UnitLedgerAccountCreatedEvent,
    UnitLedgerAccountEvent,
)
from .owner import OwnerContactInfoUpdatedEvent, OwnerCreatedEvent, OwnerEvent
from .unit import OwnerAssignedToUnitEvent, OwnerRemovedFromUnitEvent, UnitCreatedEvent, UnitEvent

__all__ = [
    "AccountCreated",
    "AccountEvent",
    "MoneyDeposited",
    "MoneyWithdrawn",
    "WithdrawalFailedDueToInsufficientFunds",
    "FeeItemCreatedEvent",
    "ExpenseCategoryCreatedEvent",
    "CondominiumAddressChangedEvent",
    "CondominiumEvent",
    "CondominiumRegisteredEvent",
    "CondominiumRenamedEvent",
    "ExpenseRecordedEvent",
    "FeeAppliedToUnitLedgerEvent",
    "PaymentReceivedOnUnitLedgerEvent",
    "UnitLedgerAccountCreatedEvent",
    "UnitLedgerAccountEvent",
    "OwnerContactInfoUpdatedEvent",
    "OwnerCreatedEvent",
    "OwnerEvent",
    "OwnerAssignedToUnitEvent",
    "OwnerRemovedFromUnitEvent",
    "UnitCreatedEvent",
    "UnitEvent",
]
