from .repository import (
    AccountRepository,
    CondominiumRepository,
    EventSourcedRepository,
    ExpenseCategoryRepository,
    ExpenseRepository,
    FeeItemRepository,
    OwnerRepository,
    UnitLedgerAccountRepository,
    UnitRepository,
)

__all__ = [
    "AccountRepository",
    "CondominiumRepository",
    "EventSourcedRepository",
    "ExpenseCategoryRepository",
    "ExpenseRepository",
    "FeeItemRepository",
    "OwnerRepository",
    "UnitLedgerAccountRepository",
    "UnitRepository",
]
