"""Command handlers: load aggregates, run the command, save the new events."""

import inspect
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from ...domain.aggregates import (
    Account,
    Condominium,
    Expense,
    ExpenseCategory,
    FeeItem,
    Owner,
    Unit,
    UnitLedgerAccount,
)
from ...domain.command import Command
from ...domain.exceptions import DomainRuleViolation, InsufficientFundsError
from ...domain.money import Money
from ...domain.values import (
    AccountId,
    Address,
    CondominiumId,
    CustomerId,
    ExpenseCategoryId,
    ExpenseId,
    FeeItemId,
    OwnerId,
    PaymentId,
    UnitId,
)
from ...routing import handles_command, setup_command_routing
from ..aggregates.repository import (
    AccountRepository,
    CondominiumRepository,
    ExpenseCategoryRepository,
    ExpenseRepository,
    FeeItemRepository,
    OwnerRepository,
    UnitLedgerAccountRepository,
    UnitRepository,
)
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

if TYPE_CHECKING:
    from ...routing import MessageRouter

T = TypeVar("T")


class CommandHandler:
    """Base class for command handlers.

    Handler methods are declared with ``@handles_command`` and routed on
    the annotated command type.
    """

    _command_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._command_router = setup_command_routing(cls)

    @classmethod
    def command_types(cls) -> list[type[Command[Any]]]:
        return [
            value._handles_command_type
            for klass in cls.__mro__
            for value in klass.__dict__.values()
            if getattr(value, "_is_command_handler", False)
        ]

    async def handle(self, command: Command[T]) -> T:
        result = self._command_router.route(self, command)
        if inspect.iscoroutine(result):
            result = await result
        return result  # type: ignore[return-value]


class AccountCommandHandler(CommandHandler):
    def __init__(self, accounts: AccountRepository):
        self.accounts = accounts

    @handles_command
    async def create_account(self, command: CreateAccount) -> str:
        account_id = AccountId(command.account_id) if command.account_id else AccountId.generate()
        account = Account.create_new(
            account_id,
            CustomerId(command.customer_id),
            Money.of(command.initial_balance_amount, command.currency_code),
        )
        await self.accounts.save(account)
        return str(account_id)

    @handles_command
    async def deposit(self, command: DepositMoney) -> None:
        account = await self.accounts.get(command.account_id)
        account.deposit(Money.of(command.amount, command.currency_code))
        await self.accounts.save(account)

    @handles_command
    async def withdraw(self, command: WithdrawMoney) -> None:
        """Withdraw money; a refused withdrawal is still saved before re-raising."""
        account = await self.accounts.get(command.account_id)
        try:
            account.withdraw(Money.of(command.amount, command.currency_code))
        except InsufficientFundsError:
            await self.accounts.save(account)
            raise
        await self.accounts.save(account)


class CondominiumCommandHandler(CommandHandler):
    def __init__(self, condominiums: CondominiumRepository):
        self.condominiums = condominiums

    @handles_command
    async def register(self, command: RegisterCondominium) -> str:
        condominium_id = (
            CondominiumId(command.condominium_id)
            if command.condominium_id
            else CondominiumId.generate()
        )
        condominium = Condominium.create_new(
            condominium_id,
            command.name,
            Address(command.street, command.city, command.postal_code, command.country),
        )
        await self.condominiums.save(condominium)
        return str(condominium_id)

    @handles_command
    async def rename(self, command: RenameCondominium) -> None:
        condominium = await self.condominiums.get(command.condominium_id)
        condominium.rename(command.new_name)
        await self.condominiums.save(condominium)

    @handles_command
    async def change_address(self, command: ChangeCondominiumAddress) -> None:
        condominium = await self.condominiums.get(command.condominium_id)
        condominium.change_address(
            Address(command.street, command.city, command.postal_code, command.country)
        )
        await self.condominiums.save(condominium)


class OwnerCommandHandler(CommandHandler):
    def __init__(self, owners: OwnerRepository):
        self.owners = owners

    @handles_command
    async def create_owner(self, command: CreateOwner) -> str:
        owner_id = OwnerId(command.owner_id) if command.owner_id else OwnerId.generate()
        owner = Owner.create_new(owner_id, command.name, command.email, command.phone_number)
        await self.owners.save(owner)
        return str(owner_id)

    @handles_command
    async def update_contact_info(self, command: UpdateOwnerContactInfo) -> None:
        owner = await self.owners.get(command.owner_id)
        owner.update_contact_info(command.name, command.email, command.phone_number)
        await self.owners.save(owner)


class UnitCommandHandler(CommandHandler):
    def __init__(
        self,
        units: UnitRepository,
        condominiums: CondominiumRepository,
        owners: OwnerRepository,
    ):
        self.units = units
        self.condominiums = condominiums
        self.owners = owners

    @handles_command
    async def create_unit(self, command: CreateUnit) -> str:
        condominium = await self.condominiums.get(command.condominium_id)
        unit_id = UnitId(command.unit_id) if command.unit_id else UnitId.generate()
        unit = Unit.create_new(unit_id, condominium.id, command.identifier)
        await self.units.save(unit)
        return str(unit_id)

    @handles_command
    async def assign_owner(self, command: AssignOwnerToUnit) -> None:
        unit = await self.units.get(command.unit_id)
        owner = await self.owners.get(command.owner_id)
        unit.assign_owner(owner.id)
        await self.units.save(unit)

    @handles_command
    async def remove_owner(self, command: RemoveOwnerFromUnit) -> None:
        unit = await self.units.get(command.unit_id)
        unit.remove_owner()
        await self.units.save(unit)


class CatalogCommandHandler(CommandHandler):
    def __init__(
        self,
        condominiums: CondominiumRepository,
        fee_items: FeeItemRepository,
        expense_categories: ExpenseCategoryRepository,
    ):
        self.condominiums = condominiums
        self.fee_items = fee_items
        self.expense_categories = expense_categories

    @handles_command
    async def create_fee_item(self, command: CreateFeeItem) -> str:
        condominium = await self.condominiums.get(command.condominium_id)
        fee_item_id = FeeItemId(command.fee_item_id) if command.fee_item_id else FeeItemId.generate()
        fee_item = FeeItem.create_new(
            fee_item_id,
            condominium.id,
            command.description,
            Money.of(command.default_amount, command.currency_code),
        )
        await self.fee_items.save(fee_item)
        return str(fee_item_id)

    @handles_command
    async def create_expense_category(self, command: CreateExpenseCategory) -> str:
        condominium = await self.condominiums.get(command.condominium_id)
        category_id = (
            ExpenseCategoryId(command.expense_category_id)
            if command.expense_category_id
            else ExpenseCategoryId.generate()
        )
        category = ExpenseCategory.create_new(category_id, condominium.id, command.name)
        await self.expense_categories.save(category)
        return str(category_id)


class LedgerCommandHandler(CommandHandler):
    """Fees and payments on unit ledger accounts."""

    def __init__(
        self,
        ledger_accounts: UnitLedgerAccountRepository,
        units: UnitRepository,
        fee_items: FeeItemRepository,
    ):
        self.ledger_accounts = ledger_accounts
        self.units = units
        self.fee_items = fee_items

    @handles_command
    async def issue_fee(self, command: IssueFeeToUnit) -> None:
        """Charge a fee, opening the unit's ledger account at zero if needed.

        Raises:
            AggregateNotFoundError: If the unit or the fee item does not exist.
            DomainRuleViolation: If the fee item belongs to another condominium.
        """
        unit = await self.units.get(command.unit_id)
        fee_item = await self.fee_items.get(command.fee_item_id)
        if fee_item.condominium_id != unit.condominium_id:
            raise DomainRuleViolation("Fee item does not belong to the unit's condominium.")

        amount = Money.of(command.amount_cents, command.currency_code)
        ledger_account = await self.ledger_accounts.find_by_unit_id(unit.id)
        if ledger_account is None:
            ledger_account = UnitLedgerAccount.create_new(unit.id, Money(0, amount.currency))

        ledger_account.apply_fee(
            fee_item.id,
            amount,
            command.due_date,
            command.description if command.description is not None else fee_item.description,
        )
        await self.ledger_accounts.save(ledger_account)

    @handles_command
    async def receive_payment(self, command: ReceivePaymentFromUnit) -> str:
        unit = await self.units.get(command.unit_id)
        ledger_account = await self.ledger_accounts.find_by_unit_id(unit.id)
        if ledger_account is None:
            raise DomainRuleViolation(f"Unit {unit.id} has no ledger account.")

        payment_id = PaymentId(command.payment_id) if command.payment_id else PaymentId.generate()
        ledger_account.receive_payment(
            Money.of(command.amount_cents, command.currency_code),
            payment_id,
            command.payment_date,
            command.payment_method,
        )
        await self.ledger_accounts.save(ledger_account)
        return str(payment_id)


class ExpenseCommandHandler(CommandHandler):
    def __init__(
        self,
        expenses: ExpenseRepository,
        condominiums: CondominiumRepository,
        expense_categories: ExpenseCategoryRepository,
    ):
        self.expenses = expenses
        self.condominiums = condominiums
        self.expense_categories = expense_categories

    @handles_command
    async def record_expense(self, command: RecordCondominiumExpense) -> str:
        condominium = await self.condominiums.get(command.condominium_id)
        category = await self.expense_categories.get(command.expense_category_id)
        if category.condominium_id != condominium.id:
            raise DomainRuleViolation(
                "Expense category does not belong to the specified condominium."
            )

        expense_id = ExpenseId(command.expense_id) if command.expense_id else ExpenseId.generate()
        expense = Expense.create_new(
            expense_id,
            condominium.id,
            category.id,
            command.description,
            Money.of(command.amount_cents, command.currency_code),
            command.expense_date,
        )
        await self.expenses.save(expense)
        return str(expense_id)
