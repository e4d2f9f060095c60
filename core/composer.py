from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from core.timefmt import from_now, humanize, parse_timestamp
from models.event import Entry, EventKind, Service

log = logging.getLogger(__name__)

DEFAULT_VIEW_URL_TEMPLATE = "{base_url}/services/{service_id}/view"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _color(kind: EventKind) -> str:
    match kind:
        case EventKind.NEW_OUTAGE:
            return "#FA4F37"
        case EventKind.SERVICE_BACK:
            return "#79C580"
        case _:
            raise ValueError(f"{kind.value} is not a reconciling event")


def _ongoing_text(count: int) -> str:
    if count == 1:
        return "Currently there is still 1 outage."
    return f"Currently there are still {count} outages."


def _section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


class NotificationComposer:
    """Builds Slack payloads for relayed monitoring events.

    Coalesced kinds (``new-outage``, ``service-back``) become one attachment
    with a header block, one block per entry with a "View" button, and for
    recoveries an optional count of outages still ongoing. Other kinds become
    a single line of text.

    ``now`` is injectable so relative times are deterministic in tests.
    """

    def __init__(
        self,
        base_url: str = "",
        view_url_template: str = DEFAULT_VIEW_URL_TEMPLATE,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._template = view_url_template
        self._now = now

    def view_url(self, service: Service) -> str:
        return self._template.format(base_url=self._base_url, service_id=service.id)

    def compose(
        self,
        kind: EventKind,
        entries: Sequence[Entry],
        ongoing_outages: int = 0,
    ) -> dict[str, Any] | None:
        """Return the payload for one flushed kind, or None if there is nothing to say."""
        if not entries:
            return None

        color = _color(kind)
        now = self._now()
        blocks: list[dict[str, Any]] = [_section(f"*{kind.label}*")]
        blocks.extend(self._entry_block(kind, entry, now) for entry in entries)

        if kind is EventKind.SERVICE_BACK and ongoing_outages > 0:
            blocks.append(_section(_ongoing_text(ongoing_outages)))

        return {
            "text": "\n",
            "attachments": [{"color": color, "blocks": blocks}],
        }

    def compose_immediate(self, kind: EventKind, service: Service) -> dict[str, Any]:
        return {"text": f"[{kind.label}] on {service.name} {service.url}"}

    def _entry_block(self, kind: EventKind, entry: Entry, now: datetime) -> dict[str, Any]:
        block = _section(self._entry_text(kind, entry, now))
        block["accessory"] = {
            "type": "button",
            "text": {"type": "plain_text", "text": "View", "emoji": True},
            "url": self.view_url(entry.service),
            "value": "view_alternate_1",
        }
        return block

    def _entry_text(self, kind: EventKind, entry: Entry, now: datetime) -> str:
        service = entry.service
        try:
            since = parse_timestamp(entry.data.get("timestamp"))
        except AttributeError:
            since = None
        if since is None:
            log.warning("No usable timestamp for %s (%s)", service.name, kind.value)

        match kind:
            case EventKind.NEW_OUTAGE:
                text = f":server: {service.name} ({service.url})"
                return f"{text} - {from_now(since, now)}" if since else text
            case EventKind.SERVICE_BACK:
                if since is None:
                    return f":server: {service.name}"
                return f":server: {service.name} (Down for {humanize(now - since)})"
            case _:
                raise ValueError(f"{kind.value} is not a reconciling event")
