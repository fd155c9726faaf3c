"""Event-sourced ledger for condominium administration."""

from .application import LedgerApplication
from .application.commands import (
    AssignOwnerToUnit,
    ChangeCondominiumAddress,
    CreateAccount,
    CreateExpenseCategory,
    CreateFeeItem,
    CreateOwner,
    CreateUnit,
    DepositMoney,
    IssueFeeToUnit,
    ReceivePaymentFromUnit,
    RecordCondominiumExpense,
    RegisterCondominium,
    RemoveOwnerFromUnit,
    RenameCondominium,
    UpdateOwnerContactInfo,
    WithdrawMoney,
)
from .application.projections import (
    GetAccountBalance,
    GetAccountTransactions,
    GetCondominiumDetails,
    GetCondominiumFinancialSummary,
    GetUnitLedgerAccountDetails,
    GetUnitStatement,
    GetUnitsInCondominium,
)
from .config import LedgerSettings
from .domain.money import Currency, Money

__all__ = [
    "LedgerApplication",
    "LedgerSettings",
    "Currency",
    "Money",
    "AssignOwnerToUnit",
    "ChangeCondominiumAddress",
    "CreateAccount",
    "CreateExpenseCategory",
    "CreateFeeItem",
    "CreateOwner",
    "CreateUnit",
    "DepositMoney",
    "IssueFeeToUnit",
    "ReceivePaymentFromUnit",
    "RecordCondominiumExpense",
    "RegisterCondominium",
    "RemoveOwnerFromUnit",
    "RenameCondominium",
    "UpdateOwnerContactInfo",
    "WithdrawMoney",
    "GetAccountBalance",
    "GetAccountTransactions",
    "GetCondominiumDetails",
    "GetCondominiumFinancialSummary",
    "GetUnitLedgerAccountDetails",
    "GetUnitStatement",
    "GetUnitsInCondominium",
]
