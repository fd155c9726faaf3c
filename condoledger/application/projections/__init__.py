from .manager import ProjectionManager
from .projector import MissingReadModelError, Projector, ReadModelConflictError
from .projectors import (
    CondominiumProjector,
    ExpenseProjector,
    FeesIssuedProjector,
    OwnerProjector,
    PaymentsReceivedProjector,
    UnitLedgerAccountProjector,
    UnitProjector,
    ledger_projectors,
)
from .queries import (
    AccountBalance,
    AccountTransactions,
    CondominiumDetails,
    CondominiumFinancialSummary,
    FeeIssued,
    GetAccountBalance,
    GetAccountTransactions,
    GetCondominiumDetails,
    GetCondominiumFinancialSummary,
    GetUnitLedgerAccountDetails,
    GetUnitStatement,
    GetUnitsInCondominium,
    LedgerQueries,
    PaymentReceived,
    QueryHandler,
    Transaction,
    UnitLedgerAccountDetails,
    UnitStatement,
    UnitSummary,
)
from .read_models import InMemoryReadModelStore, ReadModelStore, Row

__all__ = [
    "ProjectionManager",
    "MissingReadModelError",
    "Projector",
    "ReadModelConflictError",
    "CondominiumProjector",
    "ExpenseProjector",
    "FeesIssuedProjector",
    "OwnerProjector",
    "PaymentsReceivedProjector",
    "UnitLedgerAccountProjector",
    "UnitProjector",
    "ledger_projectors",
    "AccountBalance",
    "AccountTransactions",
    "CondominiumDetails",
    "CondominiumFinancialSummary",
    "FeeIssued",
    "GetAccountBalance",
    "GetAccountTransactions",
    "GetCondominiumDetails",
    "GetCondominiumFinancialSummary",
    "GetUnitLedgerAccountDetails",
    "GetUnitStatement",
    "GetUnitsInCondominium",
    "LedgerQueries",
    "PaymentReceived",
    "QueryHandler",
    "Transaction",
    "UnitLedgerAccountDetails",
    "UnitStatement",
    "UnitSummary",
    "InMemoryReadModelStore",
    "ReadModelStore",
    "Row",
]
