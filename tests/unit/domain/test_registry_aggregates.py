"""Tests for the Condominium, Unit, Owner, Expense and catalog aggregates."""

from datetime import date

import pytest

from condoledger.domain import (
    Address,
    ExpenseCategoryId,
    ExpenseId,
    Money,
    OwnerId,
)
from condoledger.domain.aggregates import (
    Condominium,
    Expense,
    ExpenseCategory,
    FeeItem,
    Owner,
    Unit,
)
from condoledger.domain.exceptions import InvalidArgumentError


# Condominium


def test_condominium_requires_a_name(condominium_id, address):
    """Test that a blank name is refused."""
    with pytest.raises(InvalidArgumentError):
        Condominium.create_new(condominium_id, "  ", address)


def test_condominium_rename(condominium_id, address):
    """Test renaming, ignoring blank or unchanged names."""
    condominium = Condominium.create_new(condominium_id, "Sunset", address)
    condominium.pull_domain_events()

    condominium.rename("")
    condominium.rename("Sunset")
    assert condominium.pending_events == []

    condominium.rename("Sunrise")
    assert condominium.name == "Sunrise"
    assert [e.event_name for e in condominium.pull_domain_events()] == ["CondominiumRenamed"]


def test_condominium_change_address(condominium_id, address):
    """Test that only a different address records an event."""
    condominium = Condominium.create_new(condominium_id, "Sunset", address)
    condominium.pull_domain_events()

    condominium.change_address(Address("1 Main St", "Springfield", "12345", "US"))
    assert condominium.pending_events == []

    new_address = Address("2 Side St", "Shelbyville", "54321", "US")
    condominium.change_address(new_address)
    assert condominium.address == new_address
    assert len(condominium.pending_events) == 1


# Unit


def test_unit_requires_an_identifier(unit_id, condominium_id):
    """Test that a blank identifier is refused."""
    with pytest.raises(InvalidArgumentError):
        Unit.create_new(unit_id, condominium_id, "")


def test_unit_owner_assignment(unit_id, condominium_id):
    """Test assigning, re-assigning the same owner, and removing."""
    unit = Unit.create_new(unit_id, condominium_id, "101")
    owner_id = OwnerId.generate()

    unit.assign_owner(owner_id)
    unit.assign_owner(owner_id)
    assert unit.owner_id == owner_id

    unit.remove_owner()
    unit.remove_owner()
    assert unit.owner_id is None

    names = [e.event_name for e in unit.pull_domain_events()]
    assert names == ["UnitCreated", "OwnerAssignedToUnit", "OwnerRemovedFromUnit"]


def test_unit_replays_owner_history(unit_id, condominium_id):
    """Test reconstitution of a unit with an owner."""
    unit = Unit.create_new(unit_id, condominium_id, "101")
    owner_id = OwnerId.generate()
    unit.assign_owner(owner_id)

    rebuilt = Unit.reconstitute_from_history(unit.pull_domain_events())

    assert rebuilt.condominium_id == condominium_id
    assert rebuilt.identifier == "101"
    assert rebuilt.owner_id == owner_id


# Owner


def test_owner_requires_valid_email():
    """Test that an email without @ is refused."""
    with pytest.raises(InvalidArgumentError):
        Owner.create_new(OwnerId.generate(), "Ada", "ada.example.com")


def test_owner_update_keeps_missing_details():
    """Test partial contact updates."""
    owner = Owner.create_new(OwnerId.generate(), "Ada", "ada@example.com", "555-0100")
    owner.pull_domain_events()

    owner.update_contact_info(email="ada@example.org")

    assert owner.name == "Ada"
    assert owner.email == "ada@example.org"
    assert owner.phone_number == "555-0100"
    assert len(owner.pull_domain_events()) == 1


def test_owner_update_without_changes_records_nothing():
    """Test that an update to the same details is a no-op."""
    owner = Owner.create_new(OwnerId.generate(), "Ada", "ada@example.com")
    owner.pull_domain_events()

    owner.update_contact_info(name="Ada", email="")

    assert owner.pending_events == []


# Expense and catalog


def test_expense_amount_must_be_positive(condominium_id):
    """Test that zero and negative expenses are refused."""
    with pytest.raises(InvalidArgumentError):
        Expense.create_new(
            ExpenseId.generate(),
            condominium_id,
            ExpenseCategoryId.generate(),
            "Nothing",
            Money.of(0, "USD"),
            date(2024, 3, 1),
        )


def test_expense_replays(condominium_id):
    """Test that an expense rebuilds from its single event."""
    expense = Expense.create_new(
        ExpenseId.generate(),
        condominium_id,
        ExpenseCategoryId.generate(),
        "Elevator repair",
        Money.of(80000, "USD"),
        date(2024, 3, 1),
    )

    rebuilt = Expense.reconstitute_from_history(expense.pull_domain_events())

    assert rebuilt.amount == Money.of(80000, "USD")
    assert rebuilt.expense_date == date(2024, 3, 1)
    assert rebuilt.condominium_id == condominium_id


def test_fee_item_and_category(condominium_id, fee_item_id):
    """Test the catalog aggregates and their validation."""
    fee_item = FeeItem.create_new(fee_item_id, condominium_id, "Maintenance", Money.of(500, "USD"))
    category = ExpenseCategory.create_new(ExpenseCategoryId.generate(), condominium_id, "Repairs")

    assert fee_item.default_amount == Money.of(500, "USD")
    assert category.condominium_id == condominium_id
    with pytest.raises(InvalidArgumentError):
        FeeItem.create_new(fee_item_id, condominium_id, "", Money.of(500, "USD"))
    with pytest.raises(InvalidArgumentError):
        ExpenseCategory.create_new(ExpenseCategoryId.generate(), condominium_id, " ")
