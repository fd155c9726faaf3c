"""Identifier and address value objects."""

import uuid
from dataclasses import dataclass
from typing import Self

from .exceptions import InvalidArgumentError


@dataclass(frozen=True)
class Identifier:
    """A typed wrapper around a canonical lowercase UUID string.

    Subclasses only differ by type, so an ``OwnerId`` never equals a
    ``UnitId`` even when both wrap the same UUID.
    """

    value: str

    def __post_init__(self) -> None:
        try:
            canonical = str(uuid.UUID(str(self.value)))
        except ValueError as e:
            raise InvalidArgumentError(
                f"Invalid {type(self).__name__}: {self.value!r} is not a UUID"
            ) from e
        object.__setattr__(self, "value", canonical)

    @classmethod
    def generate(cls) -> Self:
        return cls(str(uuid.uuid4()))

    def __str__(self) -> str:
        return self.value


class AccountId(Identifier):
    pass


class CustomerId(Identifier):
    pass


class CondominiumId(Identifier):
    pass


class UnitId(Identifier):
    pass


class OwnerId(Identifier):
    pass


class ExpenseId(Identifier):
    pass


class ExpenseCategoryId(Identifier):
    pass


class FeeItemId(Identifier):
    pass


class PaymentId(Identifier):
    pass


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    postal_code: str
    country: str

    def __post_init__(self) -> None:
        for name in ("street", "city", "postal_code", "country"):
            if not getattr(self, name).strip():
                raise InvalidArgumentError(f"Address {name} cannot be empty.")

    def __str__(self) -> str:
        return f"{self.street}, {self.city}, {self.postal_code}, {self.country}"
