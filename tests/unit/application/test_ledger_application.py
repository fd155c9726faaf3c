"""End-to-end tests for LedgerApplication on the in-memory backend."""

from datetime import date

import pytest

from condoledger import (
    CreateFeeItem,
    CreateUnit,
    GetCondominiumDetails,
    GetCondominiumFinancialSummary,
    GetUnitStatement,
    GetUnitsInCondominium,
    IssueFeeToUnit,
    LedgerApplication,
    LedgerSettings,
    ReceivePaymentFromUnit,
    RegisterCondominium,
    RenameCondominium,
)
from condoledger.application import HasLifecycle
from condoledger.application.events import InMemoryEventStore
from condoledger.application.projections import InMemoryReadModelStore
from condoledger.integrations.mongodb import MongoEventStore, MongoReadModelStore


class RecordingDependency:
    def __init__(self, name: str, trail: list[str]):
        self.name = name
        self.trail = trail

    async def on_startup(self) -> None:
        self.trail.append(f"start {self.name}")

    async def on_shutdown(self) -> None:
        self.trail.append(f"stop {self.name}")


async def run_scenario(app: LedgerApplication) -> dict[str, str]:
    condominium_id = await app.dispatch(
        RegisterCondominium(
            name="Sunset Towers",
            street="1 Main St",
            city="Springfield",
            postal_code="12345",
            country="US",
        )
    )
    unit_id = await app.dispatch(CreateUnit(condominium_id=condominium_id, identifier="101"))
    fee_item_id = await app.dispatch(
        CreateFeeItem(
            condominium_id=condominium_id,
            description="Monthly maintenance",
            default_amount=15000,
            currency_code="USD",
        )
    )
    await app.dispatch(
        IssueFeeToUnit(
            unit_id=unit_id,
            fee_item_id=fee_item_id,
            amount_cents=15000,
            currency_code="USD",
            due_date=date(2024, 1, 31),
        )
    )
    await app.dispatch(
        ReceivePaymentFromUnit(
            unit_id=unit_id,
            amount_cents=3000,
            currency_code="USD",
            payment_date=date(2024, 1, 15),
            payment_method="transfer",
        )
    )
    return {"condominium_id": condominium_id, "unit_id": unit_id}


@pytest.mark.asyncio
async def test_fee_and_payment_end_to_end(app):
    """Test that a fee and a payment show up on the unit's statement."""
    ids = await run_scenario(app)

    statement = await app.query(GetUnitStatement(unit_id=ids["unit_id"]))

    assert statement.current_balance.balance_amount_cents == 12000
    assert len(statement.fees_issued) == 1
    assert len(statement.payments_received) == 1
    assert [r.position for r in app.event_store.records] == list(range(1, 7))


@pytest.mark.asyncio
async def test_replay_projections_is_idempotent(app):
    """Test that replaying over up-to-date read models changes nothing."""
    await run_scenario(app)
    before = {table: dict(rows) for table, rows in app.read_models.tables.items()}

    assert await app.replay_projections() == 6
    assert app.read_models.tables == before


@pytest.mark.asyncio
async def test_replay_projections_rebuild(app):
    """Test that a rebuild restores read models from the event log."""
    ids = await run_scenario(app)
    await app.dispatch(RenameCondominium(condominium_id=ids["condominium_id"], new_name="Sunrise"))
    await app.read_models.clear("units", "condominiums")
    assert await app.query(GetCondominiumDetails(condominium_id=ids["condominium_id"])) is None

    replayed = await app.replay_projections(rebuild=True)

    assert replayed == 7
    details = await app.query(GetCondominiumDetails(condominium_id=ids["condominium_id"]))
    assert details.name == "Sunrise"
    units = await app.query(GetUnitsInCondominium(condominium_id=ids["condominium_id"]))
    assert [u.identifier for u in units] == ["101"]
    statement = await app.query(GetUnitStatement(unit_id=ids["unit_id"]))
    assert statement.current_balance.balance_amount_cents == 12000


@pytest.mark.asyncio
async def test_replay_projections_range(app):
    await run_scenario(app)
    await app.read_models.clear()

    assert await app.replay_projections(from_position=1, to_position=2) == 2
    assert set(app.read_models.tables) == {"condominiums", "units"}


@pytest.mark.asyncio
async def test_lifecycle_order(settings):
    """Test that dependencies start in order and stop in reverse."""
    trail: list[str] = []
    app = LedgerApplication(
        InMemoryEventStore(),
        InMemoryReadModelStore(),
        settings,
        dependencies=[
            RecordingDependency("config", trail),
            object(),
            RecordingDependency("store", trail),
        ],
    )

    async with app as started:
        assert started is app
        assert trail == ["start config", "start store"]

    assert trail == ["start config", "start store", "stop store", "stop config"]


def test_has_lifecycle_protocol():
    assert isinstance(RecordingDependency("x", []), HasLifecycle)
    assert not isinstance(object(), HasLifecycle)


def test_from_settings_memory(settings):
    app = LedgerApplication.from_settings(settings)

    assert isinstance(app.event_store, InMemoryEventStore)
    assert app.settings is settings


def test_from_settings_mongodb():
    """Test that the mongodb backend is wired without connecting."""
    app = LedgerApplication.from_settings(LedgerSettings(backend="mongodb"))

    assert isinstance(app.event_store, MongoEventStore)
    assert isinstance(app.read_models, MongoReadModelStore)
    assert len(app.dependencies) == 2


@pytest.mark.asyncio
async def test_default_currency_comes_from_settings():
    app = LedgerApplication.in_memory(LedgerSettings(default_currency="EUR"))

    summary = await app.query(
        GetCondominiumFinancialSummary(condominium_id="6a1f7a76-21c4-4a5b-9d36-6f3e0e8f9b11")
    )

    assert summary.currency_code == "EUR"
