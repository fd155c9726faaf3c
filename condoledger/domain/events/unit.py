from typing import ClassVar

from ..event import DomainEvent


class UnitEvent(DomainEvent):
    aggregate_type: ClassVar[str] = "Unit"


class UnitCreatedEvent(UnitEvent):
    event_name: ClassVar[str] = "UnitCreated"

    condominium_id: str
    identifier: str


class OwnerAssignedToUnitEvent(UnitEvent):
    event_name: ClassVar[str] = "OwnerAssignedToUnit"

    owner_id: str


class OwnerRemovedFromUnitEvent(UnitEvent):
    event_name: ClassVar[str] = "OwnerRemovedFromUnit"

    previous_owner_id: str
