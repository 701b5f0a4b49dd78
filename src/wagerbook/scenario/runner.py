"""Scenario runner: scripted markets + steps driven through a Registry."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field, ValidationError

from wagerbook.config.settings import Settings
from wagerbook.engine.market import Market
from wagerbook.engine.registry import Registry
from wagerbook.errors import WagerbookError
from wagerbook.ledger.capability import AdminCapability
from wagerbook.ledger.vault import Vault
from wagerbook.models.market import PayoutPolicy, Reward
from wagerbook.notify.sinks import EventSink

log = structlog.get_logger(__name__)

Action = Literal["deposit", "bet", "lock", "resolve", "void", "claim", "withdraw_admin", "admin_claim"]


class ScenarioError(WagerbookError):
    """Raised when a step fails unexpectedly or an expected error does not occur."""

    code = "scenario_failed"


class MarketSpec(BaseModel):
    id: str
    outcomes: str
    odds: str
    min_bet: Decimal | None = None
    max_bet: Decimal | None = None
    policy: PayoutPolicy | None = None


class Step(BaseModel):
    action: Action
    market: str | None = None
    bettor: str | None = None
    outcome: str | None = None
    amount: Decimal | None = None
    winning_outcome: int | None = None
    expect_error: str | None = None


class Scenario(BaseModel):
    name: str = "scenario"
    markets: list[MarketSpec] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)


@dataclass
class MarketSummary:
    market_id: str
    status: str
    total_staked: Decimal
    house_balance: Decimal
    admin_balance: Decimal


@dataclass
class ScenarioResult:
    """Result of a scenario run."""

    name: str
    steps_run: int = 0
    expected_errors: list[tuple[int, str]] = field(default_factory=list)
    rewards: dict[str, list[Reward]] = field(default_factory=dict)
    claims: list[tuple[str, str, Decimal]] = field(default_factory=list)
    admin_claims: list[tuple[str, Decimal]] = field(default_factory=list)
    markets: dict[str, MarketSummary] = field(default_factory=dict)


def load_scenario(path: str | Path) -> Scenario:
    """Parse a scenario TOML file. Amounts are best written as strings or ints."""
    with open(path, "rb") as f:
        raw = tomllib.load(f)
    try:
        return Scenario.model_validate({"name": Path(path).stem, **raw})
    except ValidationError as e:
        raise ScenarioError(f"Invalid scenario {path}: {e}") from e


def run_scenario(
    scenario: Scenario,
    *,
    sink: EventSink | None = None,
    settings: Settings | None = None,
) -> ScenarioResult:
    """Create the scenario's markets, apply its steps in order and summarize the end state."""
    registry = Registry.create(sink=sink, settings=settings)
    capabilities: dict[str, AdminCapability] = {}
    result = ScenarioResult(name=scenario.name)

    for spec in scenario.markets:
        capabilities[spec.id] = registry.create_market(
            spec.id,
            spec.outcomes,
            spec.odds,
            min_bet=spec.min_bet,
            max_bet=spec.max_bet,
            policy=spec.policy,
        )

    for i, step in enumerate(scenario.steps, start=1):
        market_id = _step_market_id(step, registry, i)
        market = registry.get_market(market_id)
        if market is None:
            raise ScenarioError(f"Step {i}: unknown market '{market_id}'")
        try:
            _apply_step(step, market, capabilities[market_id], result, i)
        except WagerbookError as e:
            if step.expect_error != e.code:
                raise ScenarioError(f"Step {i} ({step.action}) failed: [{e.code}] {e}") from e
            result.expected_errors.append((i, e.code))
            log.info("scenario_step_rejected", step=i, action=step.action, code=e.code)
        except (TypeError, ValueError) as e:
            raise ScenarioError(f"Step {i} ({step.action}) has invalid input: {e}") from e
        else:
            if step.expect_error:
                raise ScenarioError(f"Step {i} ({step.action}) succeeded, expected error '{step.expect_error}'")
        result.steps_run += 1

    for market_id in registry.list_markets():
        m = registry.get_market(market_id)
        result.markets[market_id] = MarketSummary(
            market_id=market_id,
            status=m.status,
            total_staked=m.get_total_staked(),
            house_balance=m.get_house_pool_balance(),
            admin_balance=m.get_admin_pool_balance(),
        )
    log.info("scenario_finished", name=scenario.name, steps=result.steps_run, errors=len(result.expected_errors))
    return result


def _step_market_id(step: Step, registry: Registry, index: int) -> str:
    if step.market:
        return step.market
    ids = registry.list_markets()
    if len(ids) != 1:
        raise ScenarioError(f"Step {index}: 'market' is required when the scenario has {len(ids)} markets")
    return ids[0]


def _require(step: Step, index: int, *names: str) -> list[Any]:
    values = [getattr(step, n) for n in names]
    missing = [n for n, v in zip(names, values) if v is None]
    if missing:
        raise ScenarioError(f"Step {index} ({step.action}) is missing {', '.join(missing)}")
    return values


def _apply_step(step: Step, market: Market, cap: AdminCapability, result: ScenarioResult, index: int) -> None:
    if step.action == "deposit":
        (amount,) = _require(step, index, "amount")
        market.deposit_to_house_pool(Vault(amount))
    elif step.action == "bet":
        bettor, outcome, amount = _require(step, index, "bettor", "outcome", "amount")
        market.place_bet(bettor, outcome, Vault(amount))
    elif step.action == "lock":
        market.lock(cap)
    elif step.action == "resolve":
        (winner,) = _require(step, index, "winning_outcome")
        result.rewards[market.market_id] = market.resolve(winner, cap)
    elif step.action == "void":
        market.void_resolve(cap)
    elif step.action == "claim":
        (bettor,) = _require(step, index, "bettor")
        payout = market.claim(bettor)
        result.claims.append((market.market_id, bettor, payout.balance()))
    elif step.action == "withdraw_admin":
        (amount,) = _require(step, index, "amount")
        market.withdraw_to_admin_pool(amount, cap)
    elif step.action == "admin_claim":
        payout = market.admin_claim(cap)
        result.admin_claims.append((market.market_id, payout.balance()))
