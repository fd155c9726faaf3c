from typing import ClassVar, Self

from ...routing import applies_event
from ..aggregate import AggregateRoot
from ..event import DomainEvent
from ..events.catalog import FeeItemCreatedEvent
from ..exceptions import InvalidArgumentError
from ..money import Money
from ..values import CondominiumId, FeeItemId


class FeeItem(AggregateRoot):
    """A kind of fee a condominium charges its units (e.g. monthly maintenance)."""

    aggregate_type: ClassVar[str] = "FeeItem"
    creation_event: ClassVar[type[DomainEvent]] = FeeItemCreatedEvent

    id: FeeItemId | None = None
    condominium_id: CondominiumId | None = None
    description: str = ""
    default_amount: Money | None = None

    @classmethod
    def create_new(
        cls,
        fee_item_id: FeeItemId,
        condominium_id: CondominiumId,
        description: str,
        default_amount: Money,
    ) -> Self:
        if not description.strip():
            raise InvalidArgumentError("Fee item description cannot be empty.")
        fee_item = cls()
        fee_item.emit(
            FeeItemCreatedEvent(
                aggregate_id=str(fee_item_id),
                condominium_id=str(condominium_id),
                description=description,
                default_amount=default_amount.amount,
                default_currency=default_amount.currency.code,
            )
        )
        return fee_item

    @applies_event
    def when_created(self, event: FeeItemCreatedEvent) -> None:
        self.id = FeeItemId(event.aggregate_id)
        self.condominium_id = CondominiumId(event.condominium_id)
        self.description = event.description
        self.default_amount = Money.of(event.default_amount, event.default_currency)
