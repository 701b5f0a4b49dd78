"""Market event append and query - persisted notification log."""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

log = structlog.get_logger(__name__)


def append_event(
    conn: DuckDBPyConnection,
    market_id: str,
    event_name: str,
    payload: dict[str, Any],
    emitted_ts: int | None = None,
) -> None:
    """Append a single market event."""
    conn.execute(
        """
        INSERT INTO market_events (market_id, event_name, emitted_ts, payload)
        VALUES (?, ?, ?, ?)
        """,
        [market_id, event_name, emitted_ts or int(time.time() * 1000), json.dumps(payload)],
    )


def list_events(conn: DuckDBPyConnection, market_id: str | None = None) -> list[dict[str, Any]]:
    """Events in append order, optionally for one market. Payloads are decoded."""
    if market_id:
        rows = conn.execute(
            "SELECT id, market_id, event_name, emitted_ts, payload FROM market_events WHERE market_id = ? ORDER BY id",
            [market_id],
        ).fetchall()
    else:
        rows = conn.execute(
            "SELECT id, market_id, event_name, emitted_ts, payload FROM market_events ORDER BY id"
        ).fetchall()
    out = []
    for r in rows:
        payload = json.loads(r[4]) if isinstance(r[4], str) else r[4]
        out.append({"id": r[0], "market_id": r[1], "event_name": r[2], "emitted_ts": r[3], "payload": payload})
    return out


def log_stats(conn: DuckDBPyConnection) -> dict[str, Any]:
    """Return event log statistics: total count, min/max emitted_ts, counts by market and event name."""
    total = conn.execute("SELECT COUNT(*) FROM market_events").fetchone()[0]
    range_row = conn.execute("SELECT MIN(emitted_ts), MAX(emitted_ts) FROM market_events").fetchone()
    by_market = conn.execute(
        "SELECT market_id, COUNT(*) AS cnt FROM market_events GROUP BY market_id ORDER BY cnt DESC, market_id LIMIT 20"
    ).fetchall()
    by_event = conn.execute(
        "SELECT event_name, COUNT(*) AS cnt FROM market_events GROUP BY event_name ORDER BY cnt DESC, event_name"
    ).fetchall()
    return {
        "total_events": total,
        "min_emitted_ts": range_row[0],
        "max_emitted_ts": range_row[1],
        "by_market": [{"market_id": r[0], "count": r[1]} for r in by_market],
        "by_event": [{"event_name": r[0], "count": r[1]} for r in by_event],
    }


class DuckDBSink:
    """EventSink that appends every notification to market_events."""

    def __init__(self, conn: DuckDBPyConnection) -> None:
        self.conn = conn

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        append_event(self.conn, str(payload.get("market_id", "")), event_name, payload)
        log.debug("event_persisted", event_name=event_name, market_id=payload.get("market_id"))
