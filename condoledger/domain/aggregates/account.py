"""Legacy bank-style account kept alongside the condominium ledger."""

from typing import ClassVar, Self

from ...routing import applies_event
from ..aggregate import AggregateRoot
from ..event import DomainEvent
from ..events.account import (
    AccountCreated,
    MoneyDeposited,
    MoneyWithdrawn,
    WithdrawalFailedDueToInsufficientFunds,
)
from ..exceptions import CurrencyMismatchError, InsufficientFundsError
from ..money import Money
from ..values import AccountId, CustomerId


class Account(AggregateRoot):
    aggregate_type: ClassVar[str] = "Account"
    creation_event: ClassVar[type[DomainEvent]] = AccountCreated

    id: AccountId | None = None
    customer_id: CustomerId | None = None
    balance: Money | None = None

    @classmethod
    def create_new(
        cls, account_id: AccountId, customer_id: CustomerId, initial_balance: Money
    ) -> Self:
        account = cls()
        account.emit(
            AccountCreated(
                aggregate_id=str(account_id),
                customer_id=str(customer_id),
                initial_balance_amount=initial_balance.amount,
                initial_balance_currency=initial_balance.currency.code,
            )
        )
        return account

    def deposit(self, amount: Money) -> None:
        aggregate_id = self._require_initialized()
        new_balance = self.balance.add(amount)
        self.emit(
            MoneyDeposited(
                aggregate_id=aggregate_id,
                amount_deposited_amount=amount.amount,
                amount_deposited_currency=amount.currency.code,
                new_balance_amount=new_balance.amount,
                new_balance_currency=new_balance.currency.code,
            )
        )

    def withdraw(self, amount: Money) -> None:
        """Withdraw money from the account.

        A withdrawal larger than the balance is refused: the failure is
        recorded as an event (so the repository can persist it) and
        ``InsufficientFundsError`` is raised. The balance is unchanged.

        Raises:
            CurrencyMismatchError: If the amount is in another currency.
            InsufficientFundsError: If the amount exceeds the balance.
        """
        aggregate_id = self._require_initialized()
        if amount.currency != self.balance.currency:
            raise CurrencyMismatchError(self.balance.currency.code, amount.currency.code)

        if amount.is_greater_than(self.balance):
            self.emit(
                WithdrawalFailedDueToInsufficientFunds(
                    aggregate_id=aggregate_id,
                    attempted_amount=amount.amount,
                    attempted_currency=amount.currency.code,
                    current_balance_amount=self.balance.amount,
                    current_balance_currency=self.balance.currency.code,
                )
            )
            raise InsufficientFundsError()

        new_balance = self.balance.subtract(amount)
        self.emit(
            MoneyWithdrawn(
                aggregate_id=aggregate_id,
                amount_withdrawn_amount=amount.amount,
                amount_withdrawn_currency=amount.currency.code,
                new_balance_amount=new_balance.amount,
                new_balance_currency=new_balance.currency.code,
            )
        )

    @applies_event
    def when_created(self, event: AccountCreated) -> None:
        self.id = AccountId(event.aggregate_id)
        self.customer_id = CustomerId(event.customer_id)
        self.balance = Money.of(event.initial_balance_amount, event.initial_balance_currency)

    @applies_event
    def when_deposited(self, event: MoneyDeposited) -> None:
        self.balance = Money.of(event.new_balance_amount, event.new_balance_currency)

    @applies_event
    def when_withdrawn(self, event: MoneyWithdrawn) -> None:
        self.balance = Money.of(event.new_balance_amount, event.new_balance_currency)

    @applies_event
    def when_withdrawal_failed(self, event: WithdrawalFailedDueToInsufficientFunds) -> None:
        pass
