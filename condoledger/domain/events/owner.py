from typing import ClassVar

from ..event import DomainEvent


class OwnerEvent(DomainEvent):
    aggregate_type: ClassVar[str] = "Owner"


class OwnerCreatedEvent(OwnerEvent):
    event_name: ClassVar[str] = "OwnerCreated"

    name: str
    email: str
    phone_number: str | None = None


class OwnerContactInfoUpdatedEvent(OwnerEvent):
    """Carries the full contact details after the update."""

    event_name: ClassVar[str] = "OwnerContactInfoUpdated"

    new_name: str
    new_email: str
    new_phone_number: str | None = None
