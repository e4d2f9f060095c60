from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from models.event import Entry, Service


@dataclass(frozen=True)
class Drained:
    """Snapshot returned by ``ReconciliationStore.drain_and_reset``."""

    outages: list[Entry]
    recoveries: list[Entry]


class ReconciliationStore:
    """In-memory record of outages and recoveries not yet notified.

    Both maps are keyed by ``service.id`` and keep insertion order. A service
    is never present in both. A recovery withdraws a pending outage and is
    itself dropped, so a service that goes down and comes back within one
    window is not reported at all; an outage withdraws a pending recovery
    and is recorded. The first entry recorded for a service wins.
    """

    def __init__(self) -> None:
        self._outages: dict[str, Entry] = {}
        self._recoveries: dict[str, Entry] = {}

    def record_outage(self, service: Service, data: Mapping[str, Any]) -> None:
        if service.id not in self._outages:
            self._outages[service.id] = Entry(service, data)
        self._recoveries.pop(service.id, None)

    def record_recovery(self, service: Service, data: Mapping[str, Any]) -> None:
        if self._outages.pop(service.id, None) is not None:
            # went down and came back within the window: nothing to report
            return
        if service.id not in self._recoveries:
            self._recoveries[service.id] = Entry(service, data)

    def drain_and_reset(self) -> Drained:
        """Return everything recorded so far and start over with empty maps."""
        drained = Drained(
            outages=list(self._outages.values()),
            recoveries=list(self._recoveries.values()),
        )
        self._outages = {}
        self._recoveries = {}
        return drained

    @property
    def outstanding_outages(self) -> Mapping[str, Entry]:
        return dict(self._outages)

    @property
    def outstanding_recoveries(self) -> Mapping[str, Entry]:
        return dict(self._recoveries)

    @property
    def size(self) -> int:
        return len(self._outages) + len(self._recoveries)
