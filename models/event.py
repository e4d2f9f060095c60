from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventKind(str, Enum):
    """Closed set of events emitted by the monitoring engine."""

    LATENCY_WARNING = "latency-warning"
    NEW_OUTAGE = "new-outage"
    CURRENT_OUTAGE = "current-outage"
    SERVICE_BACK = "service-back"
    SERVICE_ERROR = "service-error"
    SERVICE_OK = "service-ok"

    @property
    def label(self) -> str:
        match self:
            case EventKind.LATENCY_WARNING:
                return "Latency Warning"
            case EventKind.NEW_OUTAGE:
                return "New Outages"
            case EventKind.CURRENT_OUTAGE:
                return "Current Outage"
            case EventKind.SERVICE_BACK:
                return "Services are back"
            case EventKind.SERVICE_ERROR:
                return "Service Error"
            case EventKind.SERVICE_OK:
                return "Service OK"


@dataclass(frozen=True)
class Service:
    """A monitored service as supplied by the monitoring engine.

    Fields:
        id:   Opaque identifier, used as the reconciliation key.
        name: Display name.
        url:  The URL being monitored.
    """

    id: str
    name: str
    url: str = ""

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> Service:
        """Build a Service from an engine payload. Raises KeyError without ``id``."""
        service_id = str(raw["id"])
        return cls(
            id=service_id,
            name=str(raw.get("name") or service_id),
            url=str(raw.get("url") or ""),
        )


@dataclass(frozen=True)
class Entry:
    """A ``(service, data)`` pair held in the reconciliation store."""

    service: Service
    data: Mapping[str, Any] = field(default_factory=dict)
