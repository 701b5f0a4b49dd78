"""Bet ledger tests."""

from decimal import Decimal

from wagerbook.ledger.bets import BetLedger


def test_record_accumulates_per_bettor_and_outcome():
    ledger = BetLedger(["A", "B"])
    ledger.record("A", "u1", Decimal("10"))
    ledger.record("A", "u2", Decimal("5"))
    ledger.record("A", "u1", Decimal("7.5"))
    ledger.record("B", "u1", Decimal("3"))

    assert [(r.bettor_id, r.amount) for r in ledger.entries("A")] == [("u1", Decimal("17.5")), ("u2", Decimal("5"))]
    assert ledger.outcome_total("A") == Decimal("22.5")
    assert ledger.outcome_total("B") == Decimal("3")
    assert ledger.stakes_by_bettor() == {"u1": Decimal("20.5"), "u2": Decimal("5")}
    assert len(ledger) == 3


def test_find_and_empty_outcome():
    ledger = BetLedger(["A", "B"])
    assert ledger.find("A", "u1") is None
    assert ledger.outcome_total("B") == Decimal("0")
    assert list(ledger) == []
