"""Config loading tests."""

from decimal import Decimal

from wagerbook.config.settings import Settings, get_settings, load_config
from wagerbook.models.market import PayoutPolicy


def test_defaults_without_config():
    s = Settings()
    assert s.min_bet_floor == Decimal("5")
    assert s.default_min_bet == Decimal("5")
    assert s.default_max_bet == Decimal("100")
    assert s.default_policy is PayoutPolicy.FIXED_ODDS
    assert s.reward_quantum == Decimal("0.000000000000000001")
    assert s.db_path == "data/wagerbook.duckdb"
    assert s.logging_level == "INFO"


def test_profile_overlay_is_deep_merged(tmp_path):
    (tmp_path / "default.toml").write_text(
        '[market]\ndefault_max_bet = 100\ndefault_policy = "fixed_odds"\n\n[logging]\nlevel = "info"\n'
    )
    (tmp_path / "dev.toml").write_text('[market]\ndefault_policy = "proportional"\n')
    raw = load_config("dev", config_dir=tmp_path)
    assert raw["market"] == {"default_max_bet": 100, "default_policy": "proportional"}
    s = get_settings("dev", config_dir=tmp_path)
    assert s.default_policy is PayoutPolicy.PROPORTIONAL
    assert s.default_max_bet == Decimal("100")
    assert s.logging_level == "INFO"


def test_missing_profile_uses_default(tmp_path):
    (tmp_path / "default.toml").write_text('[storage]\ndb_path = "x.duckdb"\n')
    assert get_settings("nope", config_dir=tmp_path).db_path == "x.duckdb"


def test_missing_config_dir_gives_empty_config(tmp_path):
    assert load_config(config_dir=tmp_path) == {}


def test_float_amounts_keep_written_precision():
    s = Settings(market={"default_min_bet": 5.1})
    assert s.default_min_bet == Decimal("5.1")
