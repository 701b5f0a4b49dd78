"""CLI tests."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from wagerbook.cli import app as cli_app

DERBY = Path(__file__).resolve().parent.parent / "scenarios" / "derby.toml"

runner = CliRunner()


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_app, "configure_logging", lambda settings: None)
    cfg = tmp_path / "config"
    cfg.mkdir()
    db = (tmp_path / "events.duckdb").as_posix()
    (cfg / "default.toml").write_text(f'[storage]\ndb_path = "{db}"\n')
    return cfg


def test_run_and_stats(config_dir):
    result = runner.invoke(cli_app.app, ["-C", str(config_dir), "run", str(DERBY), "--persist"])
    assert result.exit_code == 0, result.output
    assert "Scenario: derby  Profile: default" in result.output
    assert "claim  derby  userX  200" in result.output

    result = runner.invoke(cli_app.app, ["-C", str(config_dir), "log", "stats"])
    assert result.exit_code == 0, result.output
    assert "By event:" in result.output
    assert "MarketCreated  2" in result.output


def test_export(config_dir, tmp_path):
    runner.invoke(cli_app.app, ["-C", str(config_dir), "run", str(DERBY), "--persist"])
    out = tmp_path / "derby.parquet"
    result = runner.invoke(cli_app.app, ["-C", str(config_dir), "log", "export", "-m", "derby", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()


def test_failing_scenario_exits_nonzero(config_dir, tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text(
        '[[markets]]\nid = "m"\noutcomes = "A,B"\nodds = "2,3"\n\n[[steps]]\naction = "claim"\nbettor = "nobody"\n'
    )
    result = runner.invoke(cli_app.app, ["-C", str(config_dir), "run", str(path)])
    assert result.exit_code == 1
    assert "[scenario_failed]" in result.output


def test_invalid_amount_exits_nonzero_without_traceback(config_dir, tmp_path):
    path = tmp_path / "negative.toml"
    path.write_text(
        '[[markets]]\nid = "m"\noutcomes = "A,B"\nodds = "2,3"\n\n'
        '[[steps]]\naction = "bet"\nbettor = "u1"\noutcome = "A"\namount = "-5"\n'
    )
    result = runner.invoke(cli_app.app, ["-C", str(config_dir), "run", str(path)])
    assert result.exit_code == 1
    assert "[scenario_failed]" in result.output
    assert "invalid_amount" in result.output
    assert not isinstance(result.exception, ValueError)


def test_profile_overlay_is_applied(config_dir, tmp_path):
    db = (tmp_path / "dev.duckdb").as_posix()
    (config_dir / "dev.toml").write_text(f'[storage]\ndb_path = "{db}"\n')
    result = runner.invoke(cli_app.app, ["-C", str(config_dir), "-p", "dev", "run", str(DERBY), "--persist"])
    assert result.exit_code == 0, result.output
    assert "Profile: dev" in result.output
    assert (tmp_path / "dev.duckdb").exists()
