"""Scripted scenarios run against a fresh registry."""

from wagerbook.scenario.runner import (
    MarketSpec,
    MarketSummary,
    Scenario,
    ScenarioError,
    ScenarioResult,
    Step,
    load_scenario,
    run_scenario,
)

__all__ = [
    "MarketSpec",
    "MarketSummary",
    "Scenario",
    "ScenarioError",
    "ScenarioResult",
    "Step",
    "load_scenario",
    "run_scenario",
]
