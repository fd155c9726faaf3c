from typing import ClassVar, Self

from ...routing import applies_event
from ..aggregate import AggregateRoot
from ..event import DomainEvent
from ..events.owner import OwnerContactInfoUpdatedEvent, OwnerCreatedEvent
from ..exceptions import InvalidArgumentError
from ..values import OwnerId


class Owner(AggregateRoot):
    aggregate_type: ClassVar[str] = "Owner"
    creation_event: ClassVar[type[DomainEvent]] = OwnerCreatedEvent

    id: OwnerId | None = None
    name: str = ""
    email: str = ""
    phone_number: str | None = None

    @classmethod
    def create_new(
        cls, owner_id: OwnerId, name: str, email: str, phone_number: str | None = None
    ) -> Self:
        if not name.strip():
            raise InvalidArgumentError("Owner name cannot be empty.")
        if "@" not in email:
            raise InvalidArgumentError(f"Invalid email address for owner: {email!r}")
        owner = cls()
        owner.emit(
            OwnerCreatedEvent(
                aggregate_id=str(owner_id),
                name=name,
                email=email,
                phone_number=phone_number,
            )
        )
        return owner

    def update_contact_info(
        self,
        name: str | None = None,
        email: str | None = None,
        phone_number: str | None = None,
    ) -> None:
        """Update the owner's contact details.

        Empty or missing values keep the current detail. No event is
        recorded when nothing actually changes.
        """
        aggregate_id = self._require_initialized()
        new_name = name if name else self.name
        new_email = email if email else self.email
        new_phone_number = phone_number if phone_number else self.phone_number

        if (new_name, new_email, new_phone_number) == (self.name, self.email, self.phone_number):
            return
        self.emit(
            OwnerContactInfoUpdatedEvent(
                aggregate_id=aggregate_id,
                new_name=new_name,
                new_email=new_email,
                new_phone_number=new_phone_number,
            )
        )

    @applies_event
    def when_created(self, event: OwnerCreatedEvent) -> None:
        self.id = OwnerId(event.aggregate_id)
        self.name = event.name
        self.email = event.email
        self.phone_number = event.phone_number

    @applies_event
    def when_contact_info_updated(self, event: OwnerContactInfoUpdatedEvent) -> None:
        self.name = event.new_name
        self.email = event.new_email
        self.phone_number = event.new_phone_number
