from .aggregate import AggregateRoot
from .command import Command
from .event import DomainEvent
from .money import Currency, Money
from .query import Query
from .values import (
    AccountId,
    Address,
    CondominiumId,
    CustomerId,
    ExpenseCategoryId,
    ExpenseId,
    FeeItemId,
    Identifier,
    OwnerId,
    PaymentId,
    UnitId,
)

__all__ = [
    "AggregateRoot",
    "Command",
    "DomainEvent",
    "Currency",
    "Money",
    "Query",
    "AccountId",
    "Address",
    "CondominiumId",
    "CustomerId",
    "ExpenseCategoryId",
    "ExpenseId",
    "FeeItemId",
    "Identifier",
    "OwnerId",
    "PaymentId",
    "UnitId",
]
