from datetime import date
from typing import ClassVar, Self

from ...routing import applies_event
from ..aggregate import AggregateRoot
from ..event import DomainEvent
from ..events.expense import ExpenseRecordedEvent
from ..exceptions import InvalidArgumentError
from ..money import Money
from ..values import CondominiumId, ExpenseCategoryId, ExpenseId


class Expense(AggregateRoot):
    """An expense paid by a condominium. Recorded once, never changed."""

    aggregate_type: ClassVar[str] = "Expense"
    creation_event: ClassVar[type[DomainEvent]] = ExpenseRecordedEvent

    id: ExpenseId | None = None
    condominium_id: CondominiumId | None = None
    expense_category_id: ExpenseCategoryId | None = None
    description: str = ""
    amount: Money | None = None
    expense_date: date | None = None

    @classmethod
    def create_new(
        cls,
        expense_id: ExpenseId,
        condominium_id: CondominiumId,
        expense_category_id: ExpenseCategoryId,
        description: str,
        amount: Money,
        expense_date: date,
    ) -> Self:
        if amount.amount <= 0:
            raise InvalidArgumentError("Expense amount must be positive.")
        expense = cls()
        expense.emit(
            ExpenseRecordedEvent(
                aggregate_id=str(expense_id),
                condominium_id=str(condominium_id),
                expense_category_id=str(expense_category_id),
                description=description,
                amount_cents=amount.amount,
                currency_code=amount.currency.code,
                expense_date=expense_date,
            )
        )
        return expense

    @applies_event
    def when_recorded(self, event: ExpenseRecordedEvent) -> None:
        self.id = ExpenseId(event.aggregate_id)
        self.condominium_id = CondominiumId(event.condominium_id)
        self.expense_category_id = ExpenseCategoryId(event.expense_category_id)
        self.description = event.description
        self.amount = Money.of(event.amount_cents, event.currency_code)
        self.expense_date = event.expense_date
