"""Payout policies - fixed-odds and proportional pool split.

Both take the winning outcome's ledger entries in ledger order and return one
Reward per entry, in the same order. Amounts that cannot be represented
exactly raise AmountOverflow rather than being rounded.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Context, Decimal, DecimalException
from typing import Sequence

from wagerbook.errors import AmountOverflow
from wagerbook.ledger.bets import BetRecord
from wagerbook.ledger.vault import AMOUNT_CONTEXT, add_amounts, amount_sum, subtract_amounts
from wagerbook.models.market import PayoutPolicy, Reward

DEFAULT_QUANTUM = Decimal("0.000000000000000001")  # 18 dp

# Shares are truncated, never rounded up, before quantizing.
_SHARE_CONTEXT = Context(prec=AMOUNT_CONTEXT.prec, rounding=ROUND_DOWN)


def fixed_odds_rewards(entries: Sequence[BetRecord], odds: Decimal) -> list[Reward]:
    """reward = stake * odds."""
    rewards = []
    for e in entries:
        try:
            amount = AMOUNT_CONTEXT.multiply(e.amount, odds)
        except DecimalException as exc:
            raise AmountOverflow(f"Reward {e.amount} * {odds} for '{e.bettor_id}' cannot be held exactly") from exc
        rewards.append(Reward(bettor_id=e.bettor_id, amount=amount))
    return rewards


def proportional_rewards(
    entries: Sequence[BetRecord],
    total_pool: Decimal,
    quantum: Decimal = DEFAULT_QUANTUM,
) -> list[Reward]:
    """reward = stake * total_pool / winning_total, summing to total_pool exactly.

    Each share is rounded down to quantum; the leftover dust goes to the
    largest winning stake (earliest in ledger order on ties).
    """
    winning_total = amount_sum(e.amount for e in entries)
    if not entries or winning_total <= 0:
        return []
    try:
        amounts = [
            _SHARE_CONTEXT.divide(_SHARE_CONTEXT.multiply(e.amount, total_pool), winning_total).quantize(
                quantum, rounding=ROUND_DOWN, context=_SHARE_CONTEXT
            )
            for e in entries
        ]
    except DecimalException as exc:
        raise AmountOverflow(
            f"Pool {total_pool} cannot be split to {quantum} within {AMOUNT_CONTEXT.prec} digits"
        ) from exc
    dust = subtract_amounts(total_pool, amount_sum(amounts))
    if dust:
        largest = max(range(len(entries)), key=lambda i: (entries[i].amount, -i))
        amounts[largest] = add_amounts(amounts[largest], dust)
    return [Reward(bettor_id=e.bettor_id, amount=a) for e, a in zip(entries, amounts)]


def compute_rewards(
    policy: PayoutPolicy,
    entries: Sequence[BetRecord],
    odds: Decimal,
    total_pool: Decimal,
    quantum: Decimal = DEFAULT_QUANTUM,
) -> list[Reward]:
    """Dispatch to the policy's reward function."""
    if policy is PayoutPolicy.FIXED_ODDS:
        return fixed_odds_rewards(entries, odds)
    if policy is PayoutPolicy.PROPORTIONAL:
        return proportional_rewards(entries, total_pool, quantum)
    raise ValueError(f"Unknown payout policy: {policy!r}")


def total_rewards(rewards: Sequence[Reward]) -> Decimal:
    return amount_sum(r.amount for r in rewards)
