"""Events of the per-condominium catalogs (fee items and expense categories)."""

from typing import ClassVar

from ..event import DomainEvent


class FeeItemCreatedEvent(DomainEvent):
    aggregate_type: ClassVar[str] = "FeeItem"
    event_name: ClassVar[str] = "FeeItemCreated"

    condominium_id: str
    description: str
    default_amount: int
    default_currency: str


class ExpenseCategoryCreatedEvent(DomainEvent):
    aggregate_type: ClassVar[str] = "ExpenseCategory"
    event_name: ClassVar[str] = "ExpenseCategoryCreated"

    condominium_id: str
    name: str
