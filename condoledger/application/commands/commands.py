"""Commands accepted by the ledger.

Identifiers travel as UUID strings and dates as ``date`` values (ISO
``YYYY-MM-DD`` strings are accepted). Creation commands return the id of
the aggregate they create; the optional id field lets callers choose it.
"""

from datetime import date

from ...domain.command import Command


class CreateAccount(Command[str]):
    customer_id: str
    initial_balance_amount: int
    currency_code: str
    account_id: str | None = None


class DepositMoney(Command[None]):
    account_id: str
    amount: int
    currency_code: str


class WithdrawMoney(Command[None]):
    account_id: str
    amount: int
    currency_code: str


class RegisterCondominium(Command[str]):
    name: str
    street: str
    city: str
    postal_code: str
    country: str
    condominium_id: str | None = None


class RenameCondominium(Command[None]):
    condominium_id: str
    new_name: str


class ChangeCondominiumAddress(Command[None]):
    condominium_id: str
    street: str
    city: str
    postal_code: str
    country: str


class CreateOwner(Command[str]):
    name: str
    email: str
    phone_number: str | None = None
    owner_id: str | None = None


class UpdateOwnerContactInfo(Command[None]):
    owner_id: str
    name: str | None = None
    email: str | None = None
    phone_number: str | None = None


class CreateUnit(Command[str]):
    condominium_id: str
    identifier: str
    unit_id: str | None = None


class AssignOwnerToUnit(Command[None]):
    unit_id: str
    owner_id: str


class RemoveOwnerFromUnit(Command[None]):
    unit_id: str


class CreateFeeItem(Command[str]):
    condominium_id: str
    description: str
    default_amount: int
    currency_code: str
    fee_item_id: str | None = None


class CreateExpenseCategory(Command[str]):
    condominium_id: str
    name: str
    expense_category_id: str | None = None


class IssueFeeToUnit(Command[None]):
    """Charge a fee to a unit.

    Without a description the fee item's description is used.
    """

    unit_id: str
    fee_item_id: str
    amount_cents: int
    currency_code: str
    due_date: date
    description: str | None = None


class ReceivePaymentFromUnit(Command[str]):
    """Record a payment made by a unit; returns the payment id."""

    unit_id: str
    amount_cents: int
    currency_code: str
    payment_date: date
    payment_method: str
    payment_id: str | None = None


class RecordCondominiumExpense(Command[str]):
    condominium_id: str
    expense_category_id: str
    description: str
    amount_cents: int
    currency_code: str
    expense_date: date
    expense_id: str | None = None
