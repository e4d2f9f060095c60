from __future__ import annotations

import logging

from core.composer import NotificationComposer
from core.dispatch import DeliveryDispatcher
from core.reconciliation import ReconciliationStore
from models.event import Entry, EventKind

log = logging.getLogger(__name__)


class FlushHandler:
    """Debounced action: drain the store and send one message per kind.

    The outage and recovery messages are composed and submitted separately
    so a failure in one never prevents the other attempt.
    """

    def __init__(
        self,
        store: ReconciliationStore,
        composer: NotificationComposer,
        dispatcher: DeliveryDispatcher,
    ) -> None:
        self._store = store
        self._composer = composer
        self._dispatcher = dispatcher

    def __call__(self) -> None:
        drained = self._store.drain_and_reset()
        if not drained.outages and not drained.recoveries:
            return

        log.info(
            "Flushing %d outage(s) and %d recovery(ies)",
            len(drained.outages),
            len(drained.recoveries),
        )
        self._send(EventKind.NEW_OUTAGE, drained.outages)
        self._send(
            EventKind.SERVICE_BACK,
            drained.recoveries,
            ongoing_outages=len(drained.outages),
        )

    def _send(self, kind: EventKind, entries: list[Entry], ongoing_outages: int = 0) -> None:
        try:
            payload = self._composer.compose(kind, entries, ongoing_outages=ongoing_outages)
        except Exception:
            log.exception("Composing %s notification failed", kind.value)
            return
        if payload is not None:
            self._dispatcher.submit(payload)
