"""Queries served from the read models, and their result types."""

import inspect
from datetime import date, datetime
from typing import TYPE_CHECKING, ClassVar, Literal, TypeVar

from pydantic import BaseModel

from ...domain.aggregates import Account
from ...domain.events import MoneyDeposited, MoneyWithdrawn
from ...domain.exceptions import AggregateNotFoundError, CurrencyMismatchError
from ...domain.query import Query
from ...routing import handles_query, setup_query_routing
from ..events.store import EventStore
from .projectors import (
    CONDOMINIUMS,
    EXPENSES,
    FEES_ISSUED,
    PAYMENTS_RECEIVED,
    UNIT_LEDGER_ACCOUNTS,
    UNITS,
)
from .read_models import ReadModelStore

if TYPE_CHECKING:
    from ...routing import MessageRouter

T = TypeVar("T")


class CondominiumDetails(BaseModel):
    id: str
    name: str
    address_street: str
    address_city: str
    address_postal_code: str
    address_country: str
    created_at: datetime
    updated_at: datetime


class UnitSummary(BaseModel):
    id: str
    identifier: str
    owner_id: str | None


class UnitLedgerAccountDetails(BaseModel):
    unit_id: str
    balance_amount_cents: int
    balance_currency_code: str
    last_updated_at: datetime


class FeeIssued(BaseModel):
    id: str
    fee_item_id: str
    description: str
    amount_cents: int
    currency_code: str
    due_date: date
    issued_at: datetime
    status: str


class PaymentReceived(BaseModel):
    id: str
    amount_cents: int
    currency_code: str
    payment_date: date
    payment_method: str
    received_at: datetime


class UnitStatement(BaseModel):
    unit_id: str
    current_balance: UnitLedgerAccountDetails
    fees_issued: list[FeeIssued]
    payments_received: list[PaymentReceived]


class CondominiumFinancialSummary(BaseModel):
    condominium_id: str
    total_income_cents: int
    total_expenses_cents: int
    net_balance_cents: int
    currency_code: str


class AccountBalance(BaseModel):
    account_id: str
    amount: int
    currency_code: str


class Transaction(BaseModel):
    """One movement on an account; ``id`` is the id of the event that made it."""

    id: str
    account_id: str
    type: Literal["DEPOSIT", "WITHDRAWAL"]
    amount: int
    currency_code: str
    occurred_on: datetime


class AccountTransactions(BaseModel):
    account_id: str
    transactions: list[Transaction]


class GetCondominiumDetails(Query[CondominiumDetails | None]):
    condominium_id: str


class GetUnitsInCondominium(Query[list[UnitSummary]]):
    condominium_id: str


class GetUnitLedgerAccountDetails(Query[UnitLedgerAccountDetails | None]):
    unit_id: str


class GetUnitStatement(Query[UnitStatement]):
    unit_id: str


class GetCondominiumFinancialSummary(Query[CondominiumFinancialSummary]):
    """Income is what the condominium's units paid; expenses are what it spent.

    Both sides are limited to ``period_start``..``period_end`` (inclusive)
    when given. Rows in more than one currency raise CurrencyMismatchError;
    with no rows at all the default currency is reported.
    """

    condominium_id: str
    period_start: date | None = None
    period_end: date | None = None


class GetAccountBalance(Query[AccountBalance]):
    account_id: str


class GetAccountTransactions(Query[AccountTransactions]):
    account_id: str


class QueryHandler:
    """Base class for objects that answer queries.

    Handler methods are declared with ``@handles_query`` and routed on the
    annotated query type; a query nobody handles raises NotImplementedError.
    """

    _query_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._query_router = setup_query_routing(cls)

    def handles(self, query_type: type[Query]) -> bool:
        return self._query_router.handles(query_type)

    async def query(self, query: Query[T]) -> T:
        result = self._query_router.route(self, query)
        if inspect.iscoroutine(result):
            result = await result
        return result  # type: ignore[return-value]


class LedgerQueries(QueryHandler):
    def __init__(self, read_models: ReadModelStore, event_store: EventStore, default_currency: str):
        self.read_models = read_models
        self.event_store = event_store
        self.default_currency = default_currency

    @handles_query
    async def condominium_details(
        self, query: GetCondominiumDetails
    ) -> CondominiumDetails | None:
        row = await self.read_models.get(CONDOMINIUMS, query.condominium_id)
        return CondominiumDetails.model_validate(row) if row is not None else None

    @handles_query
    async def units_in_condominium(self, query: GetUnitsInCondominium) -> list[UnitSummary]:
        rows = await self.read_models.find(UNITS, condominium_id=query.condominium_id)
        rows.sort(key=lambda row: row["identifier"])
        return [UnitSummary.model_validate(row) for row in rows]

    @handles_query
    async def unit_ledger_account_details(
        self, query: GetUnitLedgerAccountDetails
    ) -> UnitLedgerAccountDetails | None:
        row = await self.read_models.get(UNIT_LEDGER_ACCOUNTS, query.unit_id)
        return UnitLedgerAccountDetails.model_validate(row) if row is not None else None

    @handles_query
    async def unit_statement(self, query: GetUnitStatement) -> UnitStatement:
        """Balance plus fees (newest issued first) and payments (newest paid first).

        Raises:
            AggregateNotFoundError: If the unit has no ledger account.
        """
        balance = await self.unit_ledger_account_details(
            GetUnitLedgerAccountDetails(unit_id=query.unit_id)
        )
        if balance is None:
            raise AggregateNotFoundError("UnitLedgerAccount", query.unit_id)

        fees = await self.read_models.find(FEES_ISSUED, unit_id=query.unit_id)
        fees.sort(key=lambda row: row["issued_at"], reverse=True)
        payments = await self.read_models.find(PAYMENTS_RECEIVED, unit_id=query.unit_id)
        payments.sort(key=lambda row: row["payment_date"], reverse=True)

        return UnitStatement(
            unit_id=query.unit_id,
            current_balance=balance,
            fees_issued=[FeeIssued.model_validate(row) for row in fees],
            payments_received=[PaymentReceived.model_validate(row) for row in payments],
        )

    @handles_query
    async def financial_summary(
        self, query: GetCondominiumFinancialSummary
    ) -> CondominiumFinancialSummary:
        start = query.period_start.isoformat() if query.period_start else None
        end = query.period_end.isoformat() if query.period_end else None

        def in_period(day: str) -> bool:
            return (start is None or day >= start) and (end is None or day <= end)

        payments: list[dict] = []
        for unit in await self.read_models.find(UNITS, condominium_id=query.condominium_id):
            payments.extend(await self.read_models.find(PAYMENTS_RECEIVED, unit_id=unit["id"]))
        payments = [row for row in payments if in_period(row["payment_date"])]
        expenses = [
            row
            for row in await self.read_models.find(EXPENSES, condominium_id=query.condominium_id)
            if in_period(row["expense_date"])
        ]

        currencies = sorted({row["currency_code"] for row in payments + expenses})
        if len(currencies) > 1:
            raise CurrencyMismatchError(currencies[0], currencies[1])
        currency_code = currencies[0] if currencies else self.default_currency

        total_income = sum(row["amount_cents"] for row in payments)
        total_expenses = sum(row["amount_cents"] for row in expenses)

        return CondominiumFinancialSummary(
            condominium_id=query.condominium_id,
            total_income_cents=total_income,
            total_expenses_cents=total_expenses,
            net_balance_cents=total_income - total_expenses,
            currency_code=currency_code,
        )

    @handles_query
    async def account_balance(self, query: GetAccountBalance) -> AccountBalance:
        """Balance of a legacy account, rebuilt from its event stream.

        Raises:
            AggregateNotFoundError: If the account has no events.
        """
        history = await self.event_store.get_events_for_aggregate(
            query.account_id, Account.aggregate_type
        )
        if not history:
            raise AggregateNotFoundError("Account", query.account_id)
        account = Account.reconstitute_from_history(history)
        return AccountBalance(
            account_id=query.account_id,
            amount=account.balance.amount,
            currency_code=account.balance.currency.code,
        )

    @handles_query
    async def account_transactions(self, query: GetAccountTransactions) -> AccountTransactions:
        """Deposits and withdrawals of a legacy account, oldest first.

        Refused withdrawals did not move money and are left out.

        Raises:
            AggregateNotFoundError: If the account has no events.
        """
        history = await self.event_store.get_events_for_aggregate(
            query.account_id, Account.aggregate_type
        )
        if not history:
            raise AggregateNotFoundError("Account", query.account_id)

        transactions: list[Transaction] = []
        for event in history:
            if isinstance(event, MoneyDeposited):
                kind, amount, currency_code = (
                    "DEPOSIT",
                    event.amount_deposited_amount,
                    event.amount_deposited_currency,
                )
            elif isinstance(event, MoneyWithdrawn):
                kind, amount, currency_code = (
                    "WITHDRAWAL",
                    event.amount_withdrawn_amount,
                    event.amount_withdrawn_currency,
                )
            else:
                continue
            transactions.append(
                Transaction(
                    id=event.event_id,
                    account_id=query.account_id,
                    type=kind,
                    amount=amount,
                    currency_code=currency_code,
                    occurred_on=event.occurred_on,
                )
            )
        return AccountTransactions(account_id=query.account_id, transactions=transactions)
