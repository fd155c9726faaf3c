"""Money and currency value objects.

Amounts are integers in the currency's minor unit (cents), so arithmetic
is exact and never rounds.
"""

import re
from dataclasses import dataclass

from .exceptions import CurrencyMismatchError, InvalidArgumentError

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class Currency:
    code: str

    def __post_init__(self) -> None:
        if not isinstance(self.code, str) or not _CURRENCY_CODE.match(self.code):
            raise InvalidArgumentError(
                f"Invalid currency code: {self.code!r}. Must be 3 uppercase letters."
            )

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class Money:
    """An immutable amount of money in minor units.

    Examples:
        >>> Money.of(1000, "USD").add(Money.of(500, "USD"))
        Money(amount=1500, currency=Currency(code='USD'))
    """

    amount: int
    currency: Currency

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidArgumentError(
                f"Money amount must be an integer number of minor units, got {self.amount!r}"
            )
        if not isinstance(self.currency, Currency):
            raise InvalidArgumentError(f"Invalid currency: {self.currency!r}")

    @classmethod
    def of(cls, amount: int, currency_code: str) -> "Money":
        return cls(amount, Currency(currency_code))

    @classmethod
    def zero(cls, currency_code: str) -> "Money":
        return cls.of(0, currency_code)

    def add(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def is_greater_than(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def is_negative(self) -> bool:
        return self.amount < 0

    def equals(self, other: "Money") -> bool:
        return self == other

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency.code, other.currency.code)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"
