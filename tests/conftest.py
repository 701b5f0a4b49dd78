"""Shared fixtures."""

import pytest

from wagerbook.engine.market import Market
from wagerbook.ledger.vault import Vault
from wagerbook.notify.sinks import MemorySink


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def make_market(sink):
    def _make(
        outcomes="A,B",
        odds="2,3",
        min_bet=5,
        max_bet=100,
        policy="fixed_odds",
        title="m1",
    ):
        return Market.create(title, outcomes, odds, min_bet, max_bet, policy, sink=sink)

    return _make


@pytest.fixture
def bet():
    """place_bet with a freshly minted stake; returns the (now empty) stake vault."""

    def _bet(market, bettor, outcome, amount):
        stake = Vault(amount)
        market.place_bet(bettor, outcome, stake)
        return stake

    return _bet
