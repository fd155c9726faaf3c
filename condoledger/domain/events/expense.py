from datetime import date
from typing import ClassVar

from ..event import DomainEvent


class ExpenseRecordedEvent(DomainEvent):
    aggregate_type: ClassVar[str] = "Expense"
    event_name: ClassVar[str] = "ExpenseRecorded"

    condominium_id: str
    expense_category_id: str
    description: str
    amount_cents: int
    currency_code: str
    expense_date: date
