from sources.base import MonitorEventSource
from sources.jsonl import JsonLinesSource

__all__ = ["MonitorEventSource", "JsonLinesSource"]
