from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from core.debounce import Debouncer
from core.reconciliation import ReconciliationStore
from models.event import Service

log = logging.getLogger(__name__)


class ReconciliationSession:
    """Owns the reconciliation store and the single pending-flush timer.

    Created once per process and handed to the router. Every recorded
    outage or recovery re-arms the debouncer, whose action is the flush
    handler sharing the same store.
    """

    def __init__(self, store: ReconciliationStore, debouncer: Debouncer) -> None:
        self._store = store
        self._debouncer = debouncer

    @property
    def store(self) -> ReconciliationStore:
        return self._store

    @property
    def window_ms(self) -> int:
        return self._debouncer.window_ms

    @property
    def flush_pending(self) -> bool:
        return self._debouncer.pending

    def record_outage(self, service: Service, data: Mapping[str, Any]) -> None:
        log.debug("Outage recorded for %s", service.id)
        self._store.record_outage(service, data)
        self._debouncer.trigger()

    def record_recovery(self, service: Service, data: Mapping[str, Any]) -> None:
        log.debug("Recovery recorded for %s", service.id)
        self._store.record_recovery(service, data)
        self._debouncer.trigger()

    def close(self) -> None:
        """Flush whatever is pending now rather than at the end of the window."""
        self._debouncer.fire_now()
