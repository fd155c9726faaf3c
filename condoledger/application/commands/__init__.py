from .bus import CommandBus, CommandToHandlerMap, DelegateToHandler
from .commands import (
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
from .handlers import (
    AccountCommandHandler,
    CatalogCommandHandler,
    CommandHandler,
    CondominiumCommandHandler,
    ExpenseCommandHandler,
    LedgerCommandHandler,
    OwnerCommandHandler,
    UnitCommandHandler,
)
from .middleware import ConcurrencyRetryMiddleware, Handler, LoggingMiddleware, Middleware

__all__ = [
    "CommandBus",
    "CommandToHandlerMap",
    "DelegateToHandler",
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
    "AccountCommandHandler",
    "CatalogCommandHandler",
    "CommandHandler",
    "CondominiumCommandHandler",
    "ExpenseCommandHandler",
    "LedgerCommandHandler",
    "OwnerCommandHandler",
    "UnitCommandHandler",
    "ConcurrencyRetryMiddleware",
    "Handler",
    "LoggingMiddleware",
    "Middleware",
]
