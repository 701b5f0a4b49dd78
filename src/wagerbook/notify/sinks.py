"""Notification sinks - fire-and-forget delivery of market events."""

from __future__ import annotations

from typing import Any, Protocol

import structlog

log = structlog.get_logger(__name__)


class EventSink(Protocol):
    """Receives (event_name, payload) after an operation commits. No acknowledgment."""

    def emit(self, event_name: str, payload: dict[str, Any]) -> None: ...


class NullSink:
    """Drops every event."""

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        pass


class LogSink:
    """Writes one structlog line per event."""

    def __init__(self, logger: Any = None) -> None:
        self._log = logger or log

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self._log.info("market_event", event_name=event_name, **payload)


class MemorySink:
    """Keeps events in order in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self.events.append((event_name, dict(payload)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def of(self, event_name: str) -> list[dict[str, Any]]:
        return [p for name, p in self.events if name == event_name]

    def clear(self) -> None:
        self.events.clear()


class FanoutSink:
    """Delivers to several sinks. A failing sink is logged and skipped."""

    def __init__(self, *sinks: EventSink) -> None:
        self.sinks = list(sinks)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        for sink in self.sinks:
            try:
                sink.emit(event_name, payload)
            except Exception as e:
                log.warning("sink_emit_failed", sink=type(sink).__name__, event_name=event_name, error=str(e))
