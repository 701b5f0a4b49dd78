"""Run command: play a scenario file against a fresh registry."""

from __future__ import annotations

from pathlib import Path

import typer

from wagerbook.errors import WagerbookError
from wagerbook.notify.sinks import FanoutSink, LogSink
from wagerbook.scenario.runner import load_scenario, run_scenario
from wagerbook.storage.db import get_connection, init_schema
from wagerbook.storage.event_log import DuckDBSink


def run(
    ctx: typer.Context,
    scenario: Path = typer.Argument(..., exists=True, dir_okay=False, help="Scenario TOML file"),
    persist: bool = typer.Option(
        False, "--persist/--no-persist", help="Append emitted market events to the DuckDB event log"
    ),
) -> None:
    """Run a scenario (markets + ordered steps) and print the settlement summary."""
    settings = ctx.obj["settings"]
    conn = None
    sink = FanoutSink(LogSink())
    if persist:
        conn = get_connection(settings.db_path)
        init_schema(conn)
        sink.sinks.append(DuckDBSink(conn))
    try:
        result = run_scenario(load_scenario(scenario), sink=sink, settings=settings)
    except WagerbookError as e:
        typer.echo(f"Error: [{e.code}] {e}", err=True)
        raise typer.Exit(1)
    finally:
        if conn is not None:
            conn.close()

    typer.echo(
        f"Scenario: {result.name}  Profile: {ctx.obj['profile']}  "
        f"Steps: {result.steps_run}  Expected errors: {len(result.expected_errors)}"
    )
    for summary in result.markets.values():
        typer.echo(
            f"  {summary.market_id}  {summary.status}  staked={summary.total_staked}  "
            f"house={summary.house_balance}  admin={summary.admin_balance}"
        )
        for reward in result.rewards.get(summary.market_id, []):
            typer.echo(f"    reward  {reward.bettor_id}  {reward.amount}")
    for market_id, bettor, amount in result.claims:
        typer.echo(f"  claim  {market_id}  {bettor}  {amount}")
    for market_id, amount in result.admin_claims:
        typer.echo(f"  admin_claim  {market_id}  {amount}")
