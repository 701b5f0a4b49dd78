"""Canonical schema (Pydantic) - market config, query results, notifications."""

from wagerbook.models.events import (
    AdminClaimed,
    AdminWithdrawal,
    BetPlaced,
    HouseDeposited,
    MarketCreated,
    MarketEvent,
    MarketLocked,
    MarketResolved,
    MarketVoided,
    RewardClaimed,
)
from wagerbook.models.market import MarketConfig, MarketDetails, PayoutPolicy, Reward

__all__ = [
    "MarketConfig",
    "MarketDetails",
    "PayoutPolicy",
    "Reward",
    "MarketEvent",
    "MarketCreated",
    "BetPlaced",
    "MarketLocked",
    "MarketResolved",
    "MarketVoided",
    "RewardClaimed",
    "HouseDeposited",
    "AdminWithdrawal",
    "AdminClaimed",
]
