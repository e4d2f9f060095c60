"""Outage relay -- entry point.

Assembles the relay pipeline:

    JsonLinesSource (engine events on stdin)
        -> EventRouter
            -> immediate send            (latency, current outage, error, ok)
            -> ReconciliationSession     (new outage, service back)
                -> Debouncer -> FlushHandler -> NotificationComposer
        -> DeliveryDispatcher (detached send tasks)
        -> SlackWebhookNotifier

A shared httpx.AsyncClient is injected into the notifier.
"""
from __future__ import annotations

import asyncio
import logging
import sys

import httpx

from core.errors import ConfigurationError
from core.plugin import SlackPlugin
from settings import RelaySettings, load_settings
from sources.jsonl import JsonLinesSource

log = logging.getLogger("outage_relay")


async def run(settings: RelaySettings) -> None:
    async with httpx.AsyncClient(timeout=settings.timeout_seconds) as client:
        plugin = SlackPlugin.from_settings(settings, client)
        source = await JsonLinesSource.from_pipe(sys.stdin)
        plugin.attach(source)
        try:
            await source.run()
        finally:
            await plugin.close()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        log.error("%s", exc)
        sys.exit(2)

    logging.getLogger().setLevel(settings.log_level)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        print("\nShutting down.")


if __name__ == "__main__":
    main()
