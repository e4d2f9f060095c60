from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import httpx

from core.composer import NotificationComposer
from core.debounce import Debouncer
from core.dispatch import DeliveryDispatcher
from core.flush import FlushHandler
from core.reconciliation import ReconciliationStore
from core.router import EventRouter
from core.session import ReconciliationSession
from models.event import EventKind, Service
from notifiers.base import Notifier
from notifiers.slack import SlackWebhookNotifier
from sources.base import MonitorEventSource

if TYPE_CHECKING:
    from settings import RelaySettings

log = logging.getLogger(__name__)


class SlackPlugin:
    """Relays monitoring events to a chat channel.

    Wires the store, debouncer, flush handler and router around one
    notifier, then binds a handler for every event kind on a source.
    """

    def __init__(
        self,
        notifier: Notifier,
        composer: NotificationComposer | None = None,
        debounce_ms: int = 30_000,
        enabled_kinds: Iterable[EventKind] = tuple(EventKind),
    ) -> None:
        self.composer = composer or NotificationComposer()
        self.dispatcher = DeliveryDispatcher(notifier)
        store = ReconciliationStore()
        flush = FlushHandler(store, self.composer, self.dispatcher)
        self.session = ReconciliationSession(store, Debouncer(flush, debounce_ms))
        self.router = EventRouter(self.session, self.composer, self.dispatcher, enabled_kinds)

        log.info(
            "Slack notifications are turned on for the following events: %s (debounce %d ms)",
            ", ".join(k.value for k in EventKind if k in self.router.enabled_kinds),
            self.session.window_ms,
        )

    @classmethod
    def from_settings(cls, settings: RelaySettings, client: httpx.AsyncClient) -> SlackPlugin:
        notifier = SlackWebhookNotifier(
            client,
            settings.notification_url,
            defaults=settings.slack_defaults,
        )
        composer = NotificationComposer(
            base_url=settings.base_url,
            view_url_template=settings.view_url_template,
        )
        return cls(
            notifier,
            composer=composer,
            debounce_ms=settings.debounce_ms,
            enabled_kinds=settings.notification_events,
        )

    def attach(self, source: MonitorEventSource) -> None:
        for kind in EventKind:
            source.on(kind.value, self._handler(kind))

    def _handler(self, kind: EventKind):
        def handle(service: Service, data: Mapping[str, Any]) -> None:
            self.router.route(kind, service, data)

        return handle

    async def close(self) -> None:
        """Flush pending reconciliation now and wait for outstanding sends."""
        self.session.close()
        if self.dispatcher.in_flight:
            log.info("Waiting for %d in-flight send(s)", self.dispatcher.in_flight)
        await self.dispatcher.join()
