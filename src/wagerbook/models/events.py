"""Notification payloads emitted by markets."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel


class MarketEvent(BaseModel):
    """Base notification. market_id is the market title."""

    event_name: ClassVar[str] = "MarketEvent"

    market_id: str

    def payload(self) -> dict[str, Any]:
        """JSON-safe payload (Decimals as strings)."""
        return self.model_dump(mode="json")


class MarketCreated(MarketEvent):
    event_name: ClassVar[str] = "MarketCreated"


class BetPlaced(MarketEvent):
    event_name: ClassVar[str] = "BetPlaced"

    bettor_id: str
    outcome: str
    amount: Decimal


class MarketLocked(MarketEvent):
    event_name: ClassVar[str] = "MarketLocked"


class MarketResolved(MarketEvent):
    event_name: ClassVar[str] = "MarketResolved"

    winning_outcome: int


class MarketVoided(MarketEvent):
    event_name: ClassVar[str] = "MarketVoided"


class RewardClaimed(MarketEvent):
    event_name: ClassVar[str] = "RewardClaimed"

    bettor_id: str
    amount: Decimal


class HouseDeposited(MarketEvent):
    event_name: ClassVar[str] = "HouseDeposited"

    amount: Decimal


class AdminWithdrawal(MarketEvent):
    event_name: ClassVar[str] = "AdminWithdrawal"

    amount: Decimal


class AdminClaimed(MarketEvent):
    event_name: ClassVar[str] = "AdminClaimed"

    amount: Decimal
