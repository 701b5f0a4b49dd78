"""Event sinks for market notifications."""

from wagerbook.notify.sinks import EventSink, FanoutSink, LogSink, MemorySink, NullSink

__all__ = ["EventSink", "FanoutSink", "LogSink", "MemorySink", "NullSink"]
