from typing import ClassVar

from ..event import DomainEvent


class CondominiumEvent(DomainEvent):
    aggregate_type: ClassVar[str] = "Condominium"


class CondominiumRegisteredEvent(CondominiumEvent):
    event_name: ClassVar[str] = "CondominiumRegistered"

    name: str
    address_street: str
    address_city: str
    address_postal_code: str
    address_country: str


class CondominiumRenamedEvent(CondominiumEvent):
    event_name: ClassVar[str] = "CondominiumRenamed"

    new_name: str


class CondominiumAddressChangedEvent(CondominiumEvent):
    event_name: ClassVar[str] = "CondominiumAddressChanged"

    new_address_street: str
    new_address_city: str
    new_address_postal_code: str
    new_address_country: str
