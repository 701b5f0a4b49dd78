"""DuckDB event log tests."""

import tempfile
from pathlib import Path

import duckdb
import pytest

from wagerbook.engine.market import Market
from wagerbook.ledger.vault import Vault
from wagerbook.storage.db import get_connection, init_schema
from wagerbook.storage.event_log import DuckDBSink, append_event, list_events, log_stats
from wagerbook.storage.export import export_events_to_parquet


@pytest.fixture
def temp_db():
    tmp = tempfile.mkdtemp()
    path = Path(tmp) / "test.duckdb"
    conn = get_connection(path)
    init_schema(conn)
    yield conn
    conn.close()
    for f in Path(tmp).iterdir():
        f.unlink()
    Path(tmp).rmdir()


def test_init_schema_is_idempotent(temp_db):
    init_schema(temp_db)
    assert temp_db.execute("SELECT COUNT(*) FROM market_events").fetchone()[0] == 0


def test_duckdb_sink_persists_market_events(temp_db):
    market, cap = Market.create("derby", "A,B", "2,3", 5, 100, sink=DuckDBSink(temp_db))
    market.place_bet("userX", "A", Vault(10))
    market.void_resolve(cap)

    events = list_events(temp_db, market_id="derby")
    assert [e["event_name"] for e in events] == ["MarketCreated", "BetPlaced", "MarketVoided"]
    assert events[1]["payload"] == {"market_id": "derby", "bettor_id": "userX", "outcome": "A", "amount": "10"}
    assert all(e["emitted_ts"] > 0 for e in events)


def test_log_stats(temp_db):
    append_event(temp_db, "a", "MarketCreated", {"market_id": "a"}, emitted_ts=1000)
    append_event(temp_db, "b", "MarketCreated", {"market_id": "b"}, emitted_ts=2000)
    append_event(temp_db, "a", "MarketLocked", {"market_id": "a"}, emitted_ts=3000)
    s = log_stats(temp_db)
    assert s["total_events"] == 3
    assert s["min_emitted_ts"] == 1000
    assert s["max_emitted_ts"] == 3000
    assert s["by_market"][0] == {"market_id": "a", "count": 2}
    assert {"event_name": "MarketCreated", "count": 2} in s["by_event"]
    assert len(list_events(temp_db)) == 3


def test_export_to_parquet(temp_db, tmp_path):
    append_event(temp_db, "a", "MarketCreated", {"market_id": "a"})
    append_event(temp_db, "b", "MarketCreated", {"market_id": "b"})
    out = tmp_path / "out" / "events.parquet"
    assert export_events_to_parquet(temp_db, out, market_id="a") == 1
    assert out.exists()
    rows = duckdb.sql(f"SELECT market_id FROM read_parquet('{out}')").fetchall()
    assert rows == [("a",)]
    assert export_events_to_parquet(temp_db, tmp_path / "all.parquet") == 2
