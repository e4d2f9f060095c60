from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, TextIO

from models.event import Service
from sources.base import MonitorEventSource

log = logging.getLogger(__name__)


class JsonLinesSource(MonitorEventSource):
    """Reads one engine event per line from an ``asyncio.StreamReader``.

    Each line is a JSON object::

        {"event": "new-outage",
         "service": {"id": "42", "name": "API", "url": "https://api.example.com"},
         "data": {"timestamp": 1700000000000}}

    Blank lines are skipped; malformed ones are logged and skipped.
    Reading goes through the event loop, so cancelling ``run()`` never
    leaves a thread blocked on the pipe.
    """

    def __init__(self, reader: asyncio.StreamReader) -> None:
        super().__init__()
        self._reader = reader

    @classmethod
    async def from_pipe(cls, pipe: TextIO = sys.stdin) -> JsonLinesSource:
        """Attach a reader to ``pipe`` (stdin by default) on the running loop."""
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader()
        await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), pipe)
        return cls(reader)

    async def run(self) -> None:
        log.info("%s started, awaiting events", type(self).__name__)
        while True:
            try:
                raw = await self._reader.readline()
            except ValueError:
                # line longer than the reader limit; drop what was buffered
                log.warning("Skipping oversized event line")
                continue
            if not raw:
                log.info("%s reached end of stream", type(self).__name__)
                return
            line = raw.decode("utf-8", errors="replace")
            if line.strip():
                self.feed(line)

    def feed(self, line: str) -> bool:
        """Parse and emit a single line. Returns False if it was rejected."""
        try:
            raw: Any = json.loads(line)
            event = str(raw["event"])
            service = Service.from_mapping(raw["service"])
            data = raw.get("data") or {}
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            log.warning("Skipping malformed event line %r: %s", line.strip()[:200], exc)
            return False

        if not isinstance(data, dict):
            log.warning("Event %s for %s has non-object data; using {}", event, service.id)
            data = {}

        self.emit(event, service, data)
        return True
