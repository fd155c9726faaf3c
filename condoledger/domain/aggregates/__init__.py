from .account import Account
from .condominium import Condominium
from .expense import Expense
from .expense_category import ExpenseCategory
from .fee_item import FeeItem
from .owner import Owner
from .unit import Unit
from .unit_ledger_account import UnitLedgerAccount

__all__ = [
    "Account",
    "Condominium",
    "Expense",
    "ExpenseCategory",
    "FeeItem",
    "Owner",
    "Unit",
    "UnitLedgerAccount",
]
