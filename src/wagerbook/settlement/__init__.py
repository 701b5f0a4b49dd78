"""Reward computation for resolved markets."""

from wagerbook.settlement.payout import (
    DEFAULT_QUANTUM,
    compute_rewards,
    fixed_odds_rewards,
    proportional_rewards,
    total_rewards,
)

__all__ = [
    "DEFAULT_QUANTUM",
    "compute_rewards",
    "fixed_odds_rewards",
    "proportional_rewards",
    "total_rewards",
]
