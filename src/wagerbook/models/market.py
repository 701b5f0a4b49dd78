"""MarketConfig, MarketDetails, Reward - market parameters and query results."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, model_validator

from wagerbook.errors import InvalidConfig

DEFAULT_MIN_BET_FLOOR = Decimal("5")
# Keeps pools of many max-size stakes, with 18 decimal places, inside the
# 60-digit amount context.
MAX_BET_CEILING = Decimal("1E30")


class PayoutPolicy(str, Enum):
    """How winners are paid at resolution."""

    FIXED_ODDS = "fixed_odds"  # stake * odds, funded by the house pool
    PROPORTIONAL = "proportional"  # whole pool split by share of the winning stake


class MarketConfig(BaseModel):
    """Validated creation parameters. Outcomes and odds are index-aligned."""

    title: str
    outcomes: list[str] = Field(..., min_length=2)
    odds: list[Decimal]
    min_bet: Decimal
    max_bet: Decimal
    policy: PayoutPolicy = PayoutPolicy.FIXED_ODDS

    @model_validator(mode="after")
    def _check_schedule(self, info: ValidationInfo) -> MarketConfig:
        if any(not o for o in self.outcomes):
            raise ValueError("Outcome labels must be non-empty")
        dupes = sorted({o for o in self.outcomes if self.outcomes.count(o) > 1})
        if dupes:
            raise ValueError(f"Duplicate outcome labels: {dupes}")
        if len(self.odds) != len(self.outcomes):
            raise ValueError(
                f"Number of odds ({len(self.odds)}) should match the number of outcomes ({len(self.outcomes)})"
            )
        for label, odd in zip(self.outcomes, self.odds):
            if not odd.is_finite() or odd <= 1:
                raise ValueError(f"Odds for outcome '{label}' must be greater than 1, got {odd}")
        floor = DEFAULT_MIN_BET_FLOOR
        if info.context and info.context.get("min_bet_floor") is not None:
            floor = Decimal(str(info.context["min_bet_floor"]))
        if self.min_bet < floor:
            raise ValueError(f"Minimum bet must be at least {floor}, got {self.min_bet}")
        if self.max_bet <= self.min_bet:
            raise ValueError(f"Maximum bet ({self.max_bet}) must be greater than minimum bet ({self.min_bet})")
        if self.max_bet >= MAX_BET_CEILING:
            raise ValueError(f"Maximum bet must be below {MAX_BET_CEILING}, got {self.max_bet}")
        return self

    @classmethod
    def from_csv(
        cls,
        title: str,
        outcomes_csv: str,
        odds_csv: str,
        min_bet: Any,
        max_bet: Any,
        policy: PayoutPolicy | str = PayoutPolicy.FIXED_ODDS,
        min_bet_floor: Any = None,
    ) -> MarketConfig:
        """Parse comma-separated outcomes/odds and validate. Raises InvalidConfig."""
        outcomes = [s.strip() for s in (outcomes_csv or "").split(",")]
        try:
            odds = [Decimal(s.strip()) for s in (odds_csv or "").split(",")]
        except InvalidOperation as e:
            raise InvalidConfig(f"Failed to parse odds as decimals: {odds_csv!r}") from e
        try:
            return cls.model_validate(
                {
                    "title": title,
                    "outcomes": outcomes,
                    "odds": odds,
                    "min_bet": _decimal(min_bet),
                    "max_bet": _decimal(max_bet),
                    "policy": policy,
                },
                context={"min_bet_floor": min_bet_floor},
            )
        except ValidationError as e:
            raise InvalidConfig(_first_error(e)) from e


def _decimal(value: Any) -> Any:
    # Floats go through str() so 5.0 becomes Decimal("5.0"), not its binary expansion
    return Decimal(str(value)) if isinstance(value, float) else value


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    msg = err.get("msg", str(e)).removeprefix("Value error, ")
    return f"{loc}: {msg}" if loc else msg


class Reward(BaseModel):
    """Amount credited to a bettor's claimable container at resolution."""

    bettor_id: str
    amount: Decimal


class MarketDetails(BaseModel):
    """Snapshot returned by Market.get_market_details()."""

    title: str
    outcomes: list[str]
    odds: list[Decimal]
    total_staked: Decimal

    def as_tuple(self) -> tuple[str, list[str], list[Decimal], Decimal]:
        return (self.title, list(self.outcomes), list(self.odds), self.total_staked)
