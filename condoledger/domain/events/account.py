from typing import ClassVar

from ..event import DomainEvent


class AccountEvent(DomainEvent):
    aggregate_type: ClassVar[str] = "Account"


class AccountCreated(AccountEvent):
    event_name: ClassVar[str] = "AccountCreated"

    customer_id: str
    initial_balance_amount: int
    initial_balance_currency: str


class MoneyDeposited(AccountEvent):
    event_name: ClassVar[str] = "MoneyDeposited"

    amount_deposited_amount: int
    amount_deposited_currency: str
    new_balance_amount: int
    new_balance_currency: str


class MoneyWithdrawn(AccountEvent):
    event_name: ClassVar[str] = "MoneyWithdrawn"

    amount_withdrawn_amount: int
    amount_withdrawn_currency: str
    new_balance_amount: int
    new_balance_currency: str


class WithdrawalFailedDueToInsufficientFunds(AccountEvent):
    """A withdrawal was refused; the balance is unchanged."""

    event_name: ClassVar[str] = "WithdrawalFailedDueToInsufficientFunds"

    attempted_amount: int
    attempted_currency: str
    current_balance_amount: int
    current_balance_currency: str
