"""DuckDB persistence of market notifications."""

from wagerbook.storage.db import get_connection, init_schema
from wagerbook.storage.event_log import DuckDBSink, append_event, list_events, log_stats
from wagerbook.storage.export import export_events_to_parquet

__all__ = [
    "DuckDBSink",
    "append_event",
    "export_events_to_parquet",
    "get_connection",
    "init_schema",
    "list_events",
    "log_stats",
]
