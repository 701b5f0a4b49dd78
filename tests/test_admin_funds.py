"""House pool funding and admin pool tests."""

from decimal import Decimal

import pytest

from wagerbook.errors import InsufficientFunds, InvalidAmount, NothingToClaim, Unauthorized
from wagerbook.ledger.vault import Vault


def test_deposit_to_house_pool(make_market, sink):
    market, _ = make_market()
    funds = Vault("250.5")
    market.deposit_to_house_pool(funds)
    assert funds.is_empty()
    assert market.get_house_pool_balance() == Decimal("250.5")
    assert sink.of("HouseDeposited") == [{"market_id": "m1", "amount": "250.5"}]


def test_withdraw_to_admin_pool_then_claim(make_market):
    market, cap = make_market()
    market.deposit_to_house_pool(Vault(100))
    market.withdraw_to_admin_pool("40", cap)
    assert market.get_house_pool_balance() == Decimal("60")
    assert market.get_admin_pool_balance() == Decimal("40")
    payout = market.admin_claim(cap)
    assert payout.balance() == Decimal("40")
    assert market.get_admin_pool_balance() == 0
    with pytest.raises(NothingToClaim):
        market.admin_claim(cap)


def test_withdraw_more_than_house_balance(make_market):
    market, cap = make_market()
    market.deposit_to_house_pool(Vault(10))
    with pytest.raises(InsufficientFunds):
        market.withdraw_to_admin_pool(11, cap)
    assert market.get_house_pool_balance() == Decimal("10")
    assert market.get_admin_pool_balance() == 0


def test_withdraw_rejects_non_positive_amount(make_market):
    market, cap = make_market()
    market.deposit_to_house_pool(Vault(10))
    with pytest.raises(InvalidAmount, match="must be positive"):
        market.withdraw_to_admin_pool(0, cap)
    with pytest.raises(InvalidAmount):
        market.withdraw_to_admin_pool("-1", cap)
    assert market.get_house_pool_balance() == Decimal("10")
    assert market.get_admin_pool_balance() == 0


def test_admin_pool_only_fed_by_explicit_transfer(make_market, bet):
    market, cap = make_market()
    bet(market, "u1", "B", 50)
    market.resolve(0, cap)
    assert market.get_house_pool_balance() == Decimal("50")
    assert market.get_admin_pool_balance() == 0
    with pytest.raises(NothingToClaim):
        market.admin_claim(cap)


def test_admin_operations_require_capability(make_market):
    market, _ = make_market(title="one")
    _, other = make_market(title="two")
    market.deposit_to_house_pool(Vault(10))
    with pytest.raises(Unauthorized):
        market.withdraw_to_admin_pool(5, other)
    with pytest.raises(Unauthorized):
        market.admin_claim(other)
    assert market.get_house_pool_balance() == Decimal("10")
