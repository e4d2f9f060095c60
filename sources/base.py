from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from models.event import Service

log = logging.getLogger(__name__)

EventHandler = Callable[[Service, Mapping[str, Any]], None]


class MonitorEventSource(ABC):
    """Bridge to the monitoring engine.

    Plugins subscribe with ``on(event, handler)``; concrete sources read
    events from wherever the engine publishes them and call ``emit()``.
    A handler that raises is logged and does not stop the source.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def on(self, event: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def emit(self, event: str, service: Service, data: Mapping[str, Any]) -> int:
        """Invoke every handler bound to ``event``; returns how many ran."""
        handlers = self._handlers.get(event, [])
        for handler in handlers:
            try:
                handler(service, data)
            except Exception:
                log.exception("Handler for %s failed on service %s", event, service.id)
        return len(handlers)

    @abstractmethod
    async def run(self) -> None:
        """Read events until the source is exhausted."""
