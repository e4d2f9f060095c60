from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from core.composer import NotificationComposer
from core.dispatch import DeliveryDispatcher
from core.session import ReconciliationSession
from models.event import EventKind, Service

log = logging.getLogger(__name__)


class EventRouter:
    """Routes each engine event to reconciliation or to an immediate send.

    Kinds missing from ``enabled_kinds`` are ignored. ``new-outage`` and
    ``service-back`` go through the session and are sent on the next flush;
    every other kind is formatted and sent right away.
    """

    def __init__(
        self,
        session: ReconciliationSession,
        composer: NotificationComposer,
        dispatcher: DeliveryDispatcher,
        enabled_kinds: Iterable[EventKind] = tuple(EventKind),
    ) -> None:
        self._session = session
        self._composer = composer
        self._dispatcher = dispatcher
        self._enabled = frozenset(enabled_kinds)

    @property
    def enabled_kinds(self) -> frozenset[EventKind]:
        return self._enabled

    def route(
        self,
        kind: EventKind | str,
        service: Service,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        try:
            kind = EventKind(kind)
        except ValueError:
            log.debug("Ignoring unknown event %r", kind)
            return

        if kind not in self._enabled:
            log.debug("Ignoring disabled event %s for %s", kind.value, service.id)
            return

        data = data if data is not None else {}
        match kind:
            case EventKind.NEW_OUTAGE:
                self._session.record_outage(service, data)
            case EventKind.SERVICE_BACK:
                self._session.record_recovery(service, data)
            case (
                EventKind.LATENCY_WARNING
                | EventKind.CURRENT_OUTAGE
                | EventKind.SERVICE_ERROR
                | EventKind.SERVICE_OK
            ):
                self._dispatcher.submit(self._composer.compose_immediate(kind, service))
