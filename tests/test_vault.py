"""Value container unit tests."""

from decimal import Decimal

import pytest

from wagerbook.errors import AmountOverflow, InsufficientFunds, InvalidAmount
from wagerbook.ledger.vault import Vault, amount_sum, to_amount


def test_deposit_moves_whole_balance():
    a = Vault("10")
    b = Vault(5)
    a.deposit(b)
    assert a.balance() == Decimal("15")
    assert b.balance() == 0
    assert b.is_empty()


def test_deposit_into_itself_is_noop():
    a = Vault("10")
    a.deposit(a)
    assert a.balance() == Decimal("10")


def test_withdraw_and_withdraw_all():
    a = Vault("10.5", label="house")
    part = a.withdraw("4.5")
    assert part.balance() == Decimal("4.5")
    assert a.balance() == Decimal("6")
    rest = a.withdraw_all()
    assert rest.balance() == Decimal("6")
    assert a.is_empty()


def test_withdraw_more_than_balance_fails_without_change():
    a = Vault("10", label="house")
    with pytest.raises(InsufficientFunds, match="house"):
        a.withdraw("10.01")
    assert a.balance() == Decimal("10")


def test_new_empty():
    v = Vault.new_empty(label="x")
    assert v.balance() == 0
    assert v.label == "x"


@pytest.mark.parametrize("bad", [1.5, True])
def test_floats_and_bools_rejected(bad):
    with pytest.raises(TypeError):
        to_amount(bad)


def test_negative_amounts_rejected():
    with pytest.raises(ValueError):
        Vault("-1")
    with pytest.raises(ValueError):
        Vault("3").withdraw(-1)
    with pytest.raises(ValueError):
        to_amount("abc")
    with pytest.raises(ValueError):
        to_amount("Infinity")


def test_invalid_amounts_are_domain_errors():
    with pytest.raises(InvalidAmount) as exc:
        Vault("-5")
    assert exc.value.code == "invalid_amount"
    with pytest.raises(InvalidAmount):
        to_amount("NaN")


def test_deposit_that_would_round_fails_without_change():
    big = Vault("1E44")
    small = Vault("5.000000000000000001")
    with pytest.raises(AmountOverflow):
        big.deposit(small)
    assert big.balance() == Decimal("1E44")
    assert small.balance() == Decimal("5.000000000000000001")


def test_withdraw_that_would_round_fails_without_change():
    v = Vault("1E50")
    with pytest.raises(AmountOverflow):
        v.withdraw("0.000000000000000001")
    assert v.balance() == Decimal("1E50")


def test_amounts_beyond_sixty_digits_rejected():
    with pytest.raises(AmountOverflow):
        to_amount("1" * 61)
    assert to_amount("1" * 60) == Decimal("1" * 60)


def test_amount_sum_is_exact_or_fails():
    assert amount_sum([Decimal("1E40"), Decimal("0.000000000000000001")]) == Decimal(
        "10000000000000000000000000000000000000000.000000000000000001"
    )
    with pytest.raises(AmountOverflow):
        amount_sum([Decimal("1E44"), Decimal("0.000000000000000001")])
