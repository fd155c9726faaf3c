"""Tests for the Money and Currency value objects."""

import pytest

from condoledger.domain import Currency, Money
from condoledger.domain.exceptions import CurrencyMismatchError, InvalidArgumentError


def test_currency_accepts_three_uppercase_letters():
    """Test that a well-formed ISO code is accepted."""
    assert Currency("EUR").code == "EUR"
    assert str(Currency("EUR")) == "EUR"


@pytest.mark.parametrize("code", ["usd", "US", "USDX", "U1D", ""])
def test_currency_rejects_malformed_codes(code):
    """Test that malformed codes raise InvalidArgumentError."""
    with pytest.raises(InvalidArgumentError):
        Currency(code)


def test_invalid_argument_error_is_a_value_error():
    """Test that value object errors can be caught as ValueError."""
    with pytest.raises(ValueError):
        Currency("nope")


def test_money_rejects_non_integer_amounts():
    """Test that amounts must be integer minor units."""
    with pytest.raises(InvalidArgumentError):
        Money(10.5, Currency("USD"))  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        Money(True, Currency("USD"))  # type: ignore[arg-type]


def test_money_add_and_subtract():
    """Test arithmetic in the same currency."""
    a = Money.of(1000, "USD")
    b = Money.of(250, "USD")

    assert a.add(b) == Money.of(1250, "USD")
    assert a.subtract(b) == Money.of(750, "USD")


def test_subtract_undoes_add():
    """Test that (a + b) - b == a."""
    a = Money.of(1234, "EUR")
    b = Money.of(-99, "EUR")

    assert a.add(b).subtract(b).equals(a)


def test_money_is_immutable():
    """Test that arithmetic returns new values and never mutates operands."""
    a = Money.of(100, "USD")
    a.add(Money.of(1, "USD"))

    assert a.amount == 100
    with pytest.raises(AttributeError):
        a.amount = 5  # type: ignore[misc]


def test_currency_mismatch_leaves_operands_unchanged():
    """Test that combining currencies fails without side effects."""
    usd = Money.of(100, "USD")
    eur = Money.of(100, "EUR")

    with pytest.raises(CurrencyMismatchError) as exc_info:
        usd.add(eur)

    assert exc_info.value.left == "USD"
    assert exc_info.value.right == "EUR"
    assert usd == Money.of(100, "USD")
    assert eur == Money.of(100, "EUR")


def test_comparisons_require_same_currency():
    """Test is_greater_than across currencies."""
    with pytest.raises(CurrencyMismatchError):
        Money.of(1, "USD").is_greater_than(Money.of(0, "EUR"))


def test_comparisons():
    """Test greater-than, negativity and equality helpers."""
    assert Money.of(2, "USD").is_greater_than(Money.of(1, "USD"))
    assert not Money.of(1, "USD").is_greater_than(Money.of(1, "USD"))
    assert Money.of(-1, "USD").is_negative()
    assert not Money.zero("USD").is_negative()
    assert Money.of(5, "USD").equals(Money.of(5, "USD"))
    assert not Money.of(5, "USD").equals(Money.of(5, "EUR"))


def test_money_str():
    """Test the human-readable form."""
    assert str(Money.of(1500, "BRL")) == "1500 BRL"
