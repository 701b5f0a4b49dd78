"""`wager` CLI - global options and command registration."""

from pathlib import Path

import structlog
import typer

from wagerbook.config import get_settings
from wagerbook.config.settings import configure_logging

log = structlog.get_logger(__name__)

app = typer.Typer(
    name="wager",
    help="wagerbook - escrow and settlement for betting markets.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Directory holding default.toml and profile overlays"
    ),
    profile: str | None = typer.Option(None, "--profile", "-p", help="Profile overlay, e.g. dev for dev.toml"),
) -> None:
    """Load settings for the chosen profile and set up logging."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    log.debug("settings_loaded", profile=profile or "default", config_dir=str(config_dir) if config_dir else None)
    ctx.obj = {"settings": settings, "profile": profile or "default"}


from wagerbook.cli import log as log_cmd, run  # noqa: E402

app.command("run")(run.run)
app.add_typer(log_cmd.app, name="log")


def run_cli() -> None:
    app()


if __name__ == "__main__":
    run_cli()
