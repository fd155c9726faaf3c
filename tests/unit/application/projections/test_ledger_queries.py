"""Tests for the read-side queries."""

from datetime import date

import pytest
import pytest_asyncio

from condoledger import (
    AssignOwnerToUnit,
    CreateAccount,
    CreateExpenseCategory,
    CreateFeeItem,
    CreateOwner,
    CreateUnit,
    DepositMoney,
    GetAccountBalance,
    GetAccountTransactions,
    GetCondominiumDetails,
    GetCondominiumFinancialSummary,
    GetUnitLedgerAccountDetails,
    GetUnitStatement,
    GetUnitsInCondominium,
    IssueFeeToUnit,
    ReceivePaymentFromUnit,
    RecordCondominiumExpense,
    RegisterCondominium,
    WithdrawMoney,
)
from condoledger.domain.exceptions import (
    AggregateNotFoundError,
    CurrencyMismatchError,
    InsufficientFundsError,
)

UNKNOWN_ID = "6a1f7a76-21c4-4a5b-9d36-6f3e0e8f9b11"


@pytest_asyncio.fixture
async def condominium_id(app) -> str:
    return await app.dispatch(
        RegisterCondominium(
            name="Sunset Towers",
            street="1 Main St",
            city="Springfield",
            postal_code="12345",
            country="US",
        )
    )


@pytest_asyncio.fixture
async def fee_item_id(app, condominium_id) -> str:
    return await app.dispatch(
        CreateFeeItem(
            condominium_id=condominium_id,
            description="Monthly maintenance",
            default_amount=15000,
            currency_code="USD",
        )
    )


@pytest_asyncio.fixture
async def category_id(app, condominium_id) -> str:
    return await app.dispatch(CreateExpenseCategory(condominium_id=condominium_id, name="Repairs"))


async def create_unit(app, condominium_id: str, identifier: str) -> str:
    return await app.dispatch(CreateUnit(condominium_id=condominium_id, identifier=identifier))


async def charge(app, unit_id: str, fee_item_id: str, amount: int, due_date: date) -> None:
    await app.dispatch(
        IssueFeeToUnit(
            unit_id=unit_id,
            fee_item_id=fee_item_id,
            amount_cents=amount,
            currency_code="USD",
            due_date=due_date,
        )
    )


async def pay(app, unit_id: str, amount: int, payment_date: date) -> str:
    return await app.dispatch(
        ReceivePaymentFromUnit(
            unit_id=unit_id,
            amount_cents=amount,
            currency_code="USD",
            payment_date=payment_date,
            payment_method="transfer",
        )
    )


async def spend(app, condominium_id: str, category_id: str, amount: int, day: date) -> None:
    await app.dispatch(
        RecordCondominiumExpense(
            condominium_id=condominium_id,
            expense_category_id=category_id,
            description="Roof repair",
            amount_cents=amount,
            currency_code="USD",
            expense_date=day,
        )
    )


@pytest.mark.asyncio
async def test_condominium_details(app, condominium_id):
    details = await app.query(GetCondominiumDetails(condominium_id=condominium_id))

    assert details.id == condominium_id
    assert details.name == "Sunset Towers"
    assert details.address_postal_code == "12345"
    assert details.created_at == details.updated_at


@pytest.mark.asyncio
async def test_condominium_details_unknown(app):
    assert await app.query(GetCondominiumDetails(condominium_id=UNKNOWN_ID)) is None


@pytest.mark.asyncio
async def test_units_in_condominium_sorted_by_identifier(app, condominium_id):
    """Test that units are listed by identifier with their owner."""
    b_id = await create_unit(app, condominium_id, "B-2")
    a_id = await create_unit(app, condominium_id, "A-1")
    owner_id = await app.dispatch(CreateOwner(name="Jane Doe", email="jane@example.com"))
    await app.dispatch(AssignOwnerToUnit(unit_id=a_id, owner_id=owner_id))

    units = await app.query(GetUnitsInCondominium(condominium_id=condominium_id))

    assert [(u.id, u.identifier, u.owner_id) for u in units] == [
        (a_id, "A-1", owner_id),
        (b_id, "B-2", None),
    ]


@pytest.mark.asyncio
async def test_units_in_unknown_condominium(app):
    assert await app.query(GetUnitsInCondominium(condominium_id=UNKNOWN_ID)) == []


@pytest.mark.asyncio
async def test_unit_ledger_account_details(app, condominium_id, fee_item_id):
    """Test that the balance read model follows fees and payments."""
    unit_id = await create_unit(app, condominium_id, "101")
    assert await app.query(GetUnitLedgerAccountDetails(unit_id=unit_id)) is None

    await charge(app, unit_id, fee_item_id, 15000, date(2024, 1, 31))
    await pay(app, unit_id, 4000, date(2024, 1, 20))

    details = await app.query(GetUnitLedgerAccountDetails(unit_id=unit_id))
    assert details.balance_amount_cents == 11000
    assert details.balance_currency_code == "USD"


@pytest.mark.asyncio
async def test_unit_statement(app, condominium_id, fee_item_id):
    """Test that fees are listed newest issued first and payments newest paid first."""
    unit_id = await create_unit(app, condominium_id, "101")
    await charge(app, unit_id, fee_item_id, 15000, date(2024, 1, 31))
    await charge(app, unit_id, fee_item_id, 16000, date(2024, 2, 29))
    early = await pay(app, unit_id, 15000, date(2024, 1, 20))
    late = await pay(app, unit_id, 3000, date(2024, 2, 20))

    statement = await app.query(GetUnitStatement(unit_id=unit_id))

    assert statement.current_balance.balance_amount_cents == 13000
    assert [f.amount_cents for f in statement.fees_issued] == [16000, 15000]
    assert statement.fees_issued[0].due_date == date(2024, 2, 29)
    assert statement.fees_issued[0].status == "PENDING"
    assert [p.id for p in statement.payments_received] == [late, early]


@pytest.mark.asyncio
async def test_unit_statement_without_ledger(app, condominium_id):
    unit_id = await create_unit(app, condominium_id, "101")

    with pytest.raises(AggregateNotFoundError, match="UnitLedgerAccount"):
        await app.query(GetUnitStatement(unit_id=unit_id))


@pytest.mark.asyncio
async def test_financial_summary(app, condominium_id, fee_item_id, category_id):
    """Test that income is what the units paid and expenses what was spent."""
    first = await create_unit(app, condominium_id, "101")
    second = await create_unit(app, condominium_id, "102")
    for unit_id in (first, second):
        await charge(app, unit_id, fee_item_id, 15000, date(2024, 1, 31))
    await pay(app, first, 15000, date(2024, 1, 20))
    await pay(app, second, 5000, date(2024, 2, 5))
    await spend(app, condominium_id, category_id, 8000, date(2024, 1, 12))

    summary = await app.query(GetCondominiumFinancialSummary(condominium_id=condominium_id))

    assert summary.total_income_cents == 20000
    assert summary.total_expenses_cents == 8000
    assert summary.net_balance_cents == 12000
    assert summary.currency_code == "USD"


@pytest.mark.asyncio
async def test_financial_summary_for_period(app, condominium_id, fee_item_id, category_id):
    """Test that both sides are limited to the period, bounds included."""
    unit_id = await create_unit(app, condominium_id, "101")
    await charge(app, unit_id, fee_item_id, 30000, date(2024, 1, 31))
    await pay(app, unit_id, 1000, date(2023, 12, 31))
    await pay(app, unit_id, 2000, date(2024, 1, 1))
    await pay(app, unit_id, 3000, date(2024, 1, 31))
    await pay(app, unit_id, 4000, date(2024, 2, 1))
    await spend(app, condominium_id, category_id, 500, date(2024, 1, 31))
    await spend(app, condominium_id, category_id, 700, date(2024, 2, 1))

    summary = await app.query(
        GetCondominiumFinancialSummary(
            condominium_id=condominium_id,
            period_start=date(2024, 1, 1),
            period_end=date(2024, 1, 31),
        )
    )

    assert summary.total_income_cents == 5000
    assert summary.total_expenses_cents == 500
    assert summary.net_balance_cents == 4500


@pytest.mark.asyncio
async def test_financial_summary_ignores_other_condominiums(app, condominium_id, category_id):
    other_id = await app.dispatch(
        RegisterCondominium(
            name="Elsewhere", street="9 Far Rd", city="Ogdenville", postal_code="999", country="US"
        )
    )
    await spend(app, condominium_id, category_id, 800, date(2024, 1, 12))

    summary = await app.query(GetCondominiumFinancialSummary(condominium_id=other_id))

    assert summary.total_income_cents == 0
    assert summary.total_expenses_cents == 0


@pytest.mark.asyncio
async def test_financial_summary_currency_defaults(app, condominium_id):
    """Test that an empty summary reports the default currency."""
    summary = await app.query(GetCondominiumFinancialSummary(condominium_id=condominium_id))

    assert summary.currency_code == app.settings.default_currency
    assert summary.net_balance_cents == 0


@pytest.mark.asyncio
async def test_financial_summary_currency_from_expenses(app, condominium_id):
    """Test that with no income the expenses decide the currency."""
    category_id = await app.dispatch(
        CreateExpenseCategory(condominium_id=condominium_id, name="Repairs")
    )
    await app.dispatch(
        RecordCondominiumExpense(
            condominium_id=condominium_id,
            expense_category_id=category_id,
            description="Boiler",
            amount_cents=900,
            currency_code="EUR",
            expense_date=date(2024, 3, 1),
        )
    )

    summary = await app.query(GetCondominiumFinancialSummary(condominium_id=condominium_id))

    assert summary.currency_code == "EUR"
    assert summary.net_balance_cents == -900


@pytest.mark.asyncio
async def test_financial_summary_refuses_mixed_currencies(
    app, condominium_id, fee_item_id, category_id
):
    """Test that USD income and EUR expenses are not added together."""
    unit_id = await create_unit(app, condominium_id, "101")
    await charge(app, unit_id, fee_item_id, 15000, date(2024, 1, 31))
    await pay(app, unit_id, 15000, date(2024, 1, 20))
    await app.dispatch(
        RecordCondominiumExpense(
            condominium_id=condominium_id,
            expense_category_id=category_id,
            description="Boiler",
            amount_cents=900,
            currency_code="EUR",
            expense_date=date(2024, 3, 1),
        )
    )

    with pytest.raises(CurrencyMismatchError):
        await app.query(GetCondominiumFinancialSummary(condominium_id=condominium_id))

    january = await app.query(
        GetCondominiumFinancialSummary(
            condominium_id=condominium_id, period_end=date(2024, 1, 31)
        )
    )
    assert (january.total_income_cents, january.currency_code) == (15000, "USD")


@pytest.mark.asyncio
async def test_account_balance(app):
    account_id = await app.dispatch(
        CreateAccount(
            customer_id="0b0f0d6e-7e53-4c39-9c2b-5ac0b0ea7a10",
            initial_balance_amount=2500,
            currency_code="EUR",
        )
    )

    balance = await app.query(GetAccountBalance(account_id=account_id))

    assert (balance.amount, balance.currency_code) == (2500, "EUR")


@pytest.mark.asyncio
async def test_account_balance_unknown(app):
    with pytest.raises(AggregateNotFoundError, match="Account"):
        await app.query(GetAccountBalance(account_id=UNKNOWN_ID))


@pytest.mark.asyncio
async def test_account_transactions(app):
    """Test that deposits and withdrawals are listed oldest first, refusals left out."""
    account_id = await app.dispatch(
        CreateAccount(
            customer_id="0b0f0d6e-7e53-4c39-9c2b-5ac0b0ea7a10",
            initial_balance_amount=1000,
            currency_code="USD",
        )
    )
    await app.dispatch(DepositMoney(account_id=account_id, amount=500, currency_code="USD"))
    await app.dispatch(WithdrawMoney(account_id=account_id, amount=300, currency_code="USD"))
    with pytest.raises(InsufficientFundsError):
        await app.dispatch(WithdrawMoney(account_id=account_id, amount=9000, currency_code="USD"))

    result = await app.query(GetAccountTransactions(account_id=account_id))

    assert result.account_id == account_id
    assert [(t.type, t.amount, t.currency_code) for t in result.transactions] == [
        ("DEPOSIT", 500, "USD"),
        ("WITHDRAWAL", 300, "USD"),
    ]
    stream = await app.event_store.load_stream(account_id, "Account")
    assert [t.id for t in result.transactions] == [s.event.event_id for s in stream[1:3]]
    assert result.transactions[0].occurred_on == stream[1].event.occurred_on


@pytest.mark.asyncio
async def test_account_transactions_without_movements(app):
    account_id = await app.dispatch(
        CreateAccount(
            customer_id="0b0f0d6e-7e53-4c39-9c2b-5ac0b0ea7a10",
            initial_balance_amount=0,
            currency_code="EUR",
        )
    )

    result = await app.query(GetAccountTransactions(account_id=account_id))

    assert result.transactions == []


@pytest.mark.asyncio
async def test_account_transactions_unknown(app):
    with pytest.raises(AggregateNotFoundError, match="Account"):
        await app.query(GetAccountTransactions(account_id=UNKNOWN_ID))
