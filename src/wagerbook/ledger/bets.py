"""Per-outcome bet ledger - one accumulating record per bettor per outcome."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator

from wagerbook.ledger.vault import ZERO, add_amounts, amount_sum


@dataclass
class BetRecord:
    """A bettor's cumulative stake on one outcome."""

    bettor_id: str
    amount: Decimal


class BetLedger:
    """Ordered mapping outcome label -> [BetRecord]. Records keep insertion order."""

    def __init__(self, outcomes: list[str]) -> None:
        self._entries: dict[str, list[BetRecord]] = {o: [] for o in outcomes}

    def find(self, outcome: str, bettor_id: str) -> BetRecord | None:
        for rec in self._entries[outcome]:
            if rec.bettor_id == bettor_id:
                return rec
        return None

    def record(self, outcome: str, bettor_id: str, amount: Decimal) -> BetRecord:
        """Create the bettor's record or add amount to it."""
        rec = self.find(outcome, bettor_id)
        if rec is None:
            rec = BetRecord(bettor_id=bettor_id, amount=amount)
            self._entries[outcome].append(rec)
        else:
            rec.amount = add_amounts(rec.amount, amount)
        return rec

    def entries(self, outcome: str) -> list[BetRecord]:
        return list(self._entries[outcome])

    def outcome_total(self, outcome: str) -> Decimal:
        return amount_sum(r.amount for r in self._entries[outcome])

    def stakes_by_bettor(self) -> dict[str, Decimal]:
        """Sum of each bettor's stakes across all outcomes."""
        totals: dict[str, Decimal] = {}
        for _, rec in self:
            totals[rec.bettor_id] = add_amounts(totals.get(rec.bettor_id, ZERO), rec.amount)
        return totals

    def __iter__(self) -> Iterator[tuple[str, BetRecord]]:
        for outcome, records in self._entries.items():
            for rec in records:
                yield outcome, rec

    def __len__(self) -> int:
        return sum(len(v) for v in self._entries.values())
