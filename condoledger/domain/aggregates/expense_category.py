from typing import ClassVar, Self

from ...routing import applies_event
from ..aggregate import AggregateRoot
from ..event import DomainEvent
from ..events.catalog import ExpenseCategoryCreatedEvent
from ..exceptions import InvalidArgumentError
from ..values import CondominiumId, ExpenseCategoryId


class ExpenseCategory(AggregateRoot):
    aggregate_type: ClassVar[str] = "ExpenseCategory"
    creation_event: ClassVar[type[DomainEvent]] = ExpenseCategoryCreatedEvent

    id: ExpenseCategoryId | None = None
    condominium_id: CondominiumId | None = None
    name: str = ""

    @classmethod
    def create_new(
        cls, category_id: ExpenseCategoryId, condominium_id: CondominiumId, name: str
    ) -> Self:
        if not name.strip():
            raise InvalidArgumentError("Expense category name cannot be empty.")
        category = cls()
        category.emit(
            ExpenseCategoryCreatedEvent(
                aggregate_id=str(category_id),
                condominium_id=str(condominium_id),
                name=name,
            )
        )
        return category

    @applies_event
    def when_created(self, event: ExpenseCategoryCreatedEvent) -> None:
        self.id = ExpenseCategoryId(event.aggregate_id)
        self.condominium_id = CondominiumId(event.condominium_id)
        self.name = event.name
