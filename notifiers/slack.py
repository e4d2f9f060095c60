from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from notifiers.base import DeliveryResult, Notifier

log = logging.getLogger(__name__)

DEFAULT_OPTIONS = {
    "channel": "#general",
    "username": "Watchmen",
    "icon_emoji": ":mega:",
}


class SlackWebhookNotifier(Notifier):
    """Posts payloads to a Slack incoming webhook.

    ``defaults`` (channel, username, icon_emoji) are merged underneath every
    payload, so a payload key always wins over the configured default.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        webhook_url: str,
        defaults: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(client)
        self._webhook_url = webhook_url
        self._defaults = dict(DEFAULT_OPTIONS if defaults is None else defaults)

    @property
    def name(self) -> str:
        return "Slack"

    async def send(self, payload: dict[str, Any]) -> DeliveryResult:
        body = {**self._defaults, **payload}
        try:
            resp = await self._client.post(self._webhook_url, json=body)
        except httpx.HTTPError as exc:
            log.error("[%s] HTTP error: %s", self.name, exc)
            return DeliveryResult(ok=False, error=str(exc))

        if resp.status_code != 200:
            log.warning("[%s] Unexpected status %d: %s", self.name, resp.status_code, resp.text)
            return DeliveryResult(ok=False, status_code=resp.status_code, error=resp.text)

        log.debug("[%s] Delivered message to %s", self.name, body.get("channel"))
        return DeliveryResult(ok=True, status_code=resp.status_code)
