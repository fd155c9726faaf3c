from typing import ClassVar, Self

from ...routing import applies_event
from ..aggregate import AggregateRoot
from ..event import DomainEvent
from ..events.unit import OwnerAssignedToUnitEvent, OwnerRemovedFromUnitEvent, UnitCreatedEvent
from ..exceptions import InvalidArgumentError
from ..values import CondominiumId, OwnerId, UnitId


class Unit(AggregateRoot):
    aggregate_type: ClassVar[str] = "Unit"
    creation_event: ClassVar[type[DomainEvent]] = UnitCreatedEvent

    id: UnitId | None = None
    condominium_id: CondominiumId | None = None
    identifier: str = ""
    owner_id: OwnerId | None = None

    @classmethod
    def create_new(
        cls, unit_id: UnitId, condominium_id: CondominiumId, identifier: str
    ) -> Self:
        if not identifier.strip():
            raise InvalidArgumentError("Unit identifier cannot be empty.")
        unit = cls()
        unit.emit(
            UnitCreatedEvent(
                aggregate_id=str(unit_id),
                condominium_id=str(condominium_id),
                identifier=identifier,
            )
        )
        return unit

    def assign_owner(self, owner_id: OwnerId) -> None:
        aggregate_id = self._require_initialized()
        if owner_id == self.owner_id:
            return
        self.emit(OwnerAssignedToUnitEvent(aggregate_id=aggregate_id, owner_id=str(owner_id)))

    def remove_owner(self) -> None:
        aggregate_id = self._require_initialized()
        if self.owner_id is None:
            return
        self.emit(
            OwnerRemovedFromUnitEvent(
                aggregate_id=aggregate_id, previous_owner_id=str(self.owner_id)
            )
        )

    @applies_event
    def when_created(self, event: UnitCreatedEvent) -> None:
        self.id = UnitId(event.aggregate_id)
        self.condominium_id = CondominiumId(event.condominium_id)
        self.identifier = event.identifier

    @applies_event
    def when_owner_assigned(self, event: OwnerAssignedToUnitEvent) -> None:
        self.owner_id = OwnerId(event.owner_id)

    @applies_event
    def when_owner_removed(self, event: OwnerRemovedFromUnitEvent) -> None:
        self.owner_id = None
