"""Central test fixtures."""

from datetime import date

import pytest

from condoledger.application import LedgerApplication
from condoledger.application.events import InMemoryEventStore
from condoledger.application.projections import (
    InMemoryReadModelStore,
    ProjectionManager,
    ledger_projectors,
)
from condoledger.config import LedgerSettings
from condoledger.domain import (
    Address,
    CondominiumId,
    FeeItemId,
    Money,
    PaymentId,
    UnitId,
)


@pytest.fixture
def settings() -> LedgerSettings:
    """Settings with no delay between concurrency retries."""
    return LedgerSettings(concurrency_retry_delay=0.0)


@pytest.fixture
def event_store() -> InMemoryEventStore:
    """Create an in-memory event store."""
    return InMemoryEventStore()


@pytest.fixture
def read_models() -> InMemoryReadModelStore:
    """Create an in-memory read-model store."""
    return InMemoryReadModelStore()


@pytest.fixture
def projections(read_models: InMemoryReadModelStore) -> ProjectionManager:
    """Projection manager running every ledger projector."""
    return ProjectionManager(ledger_projectors(read_models), read_models)


@pytest.fixture
def app(settings: LedgerSettings) -> LedgerApplication:
    """In-memory ledger application."""
    return LedgerApplication.in_memory(settings)


@pytest.fixture
def address() -> Address:
    return Address("1 Main St", "Springfield", "12345", "US")


@pytest.fixture
def condominium_id() -> CondominiumId:
    return CondominiumId.generate()


@pytest.fixture
def unit_id() -> UnitId:
    return UnitId.generate()


@pytest.fixture
def fee_item_id() -> FeeItemId:
    return FeeItemId.generate()


@pytest.fixture
def payment_id() -> PaymentId:
    return PaymentId.generate()


@pytest.fixture
def usd():
    """Shortcut for building USD amounts."""

    def make(amount: int) -> Money:
        return Money.of(amount, "USD")

    return make


@pytest.fixture
def due_date() -> date:
    return date(2024, 1, 31)
