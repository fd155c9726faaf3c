from typing import ClassVar, Self

from ...routing import applies_event
from ..aggregate import AggregateRoot
from ..event import DomainEvent
from ..events.condominium import (
    CondominiumAddressChangedEvent,
    CondominiumRegisteredEvent,
    CondominiumRenamedEvent,
)
from ..exceptions import InvalidArgumentError
from ..values import Address, CondominiumId


class Condominium(AggregateRoot):
    aggregate_type: ClassVar[str] = "Condominium"
    creation_event: ClassVar[type[DomainEvent]] = CondominiumRegisteredEvent

    id: CondominiumId | None = None
    name: str = ""
    address: Address | None = None

    @classmethod
    def create_new(cls, condominium_id: CondominiumId, name: str, address: Address) -> Self:
        if not name.strip():
            raise InvalidArgumentError("Condominium name cannot be empty.")
        condominium = cls()
        condominium.emit(
            CondominiumRegisteredEvent(
                aggregate_id=str(condominium_id),
                name=name,
                address_street=address.street,
                address_city=address.city,
                address_postal_code=address.postal_code,
                address_country=address.country,
            )
        )
        return condominium

    def rename(self, new_name: str) -> None:
        """Rename the condominium; empty or unchanged names are ignored."""
        aggregate_id = self._require_initialized()
        if not new_name.strip() or new_name == self.name:
            return
        self.emit(CondominiumRenamedEvent(aggregate_id=aggregate_id, new_name=new_name))

    def change_address(self, new_address: Address) -> None:
        aggregate_id = self._require_initialized()
        if new_address == self.address:
            return
        self.emit(
            CondominiumAddressChangedEvent(
                aggregate_id=aggregate_id,
                new_address_street=new_address.street,
                new_address_city=new_address.city,
                new_address_postal_code=new_address.postal_code,
                new_address_country=new_address.country,
            )
        )

    @applies_event
    def when_registered(self, event: CondominiumRegisteredEvent) -> None:
        self.id = CondominiumId(event.aggregate_id)
        self.name = event.name
        self.address = Address(
            event.address_street,
            event.address_city,
            event.address_postal_code,
            event.address_country,
        )

    @applies_event
    def when_renamed(self, event: CondominiumRenamedEvent) -> None:
        self.name = event.new_name

    @applies_event
    def when_address_changed(self, event: CondominiumAddressChangedEvent) -> None:
        self.address = Address(
            event.new_address_street,
            event.new_address_city,
            event.new_address_postal_code,
            event.new_address_country,
        )
