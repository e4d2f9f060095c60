from __future__ import annotations

import asyncio
import logging
from typing import Any

from notifiers.base import DeliveryResult, Notifier

log = logging.getLogger(__name__)


class DeliveryDispatcher:
    """Fire-and-forget wrapper around a ``Notifier``.

    ``submit()`` returns as soon as the send task is created; the result is
    only observed by a done-callback that logs failures. Each submission is
    an independent task, so one failed send never affects another.
    """

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier
        self._tasks: set[asyncio.Task[DeliveryResult]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def submit(self, payload: dict[str, Any]) -> asyncio.Task[DeliveryResult]:
        task = asyncio.get_running_loop().create_task(
            self._notifier.send(payload),
            name=f"send-{self._notifier.name}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    async def join(self) -> None:
        """Wait for every send submitted so far."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _on_done(self, task: asyncio.Task[DeliveryResult]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            log.warning("Send to %s was cancelled", self._notifier.name)
            return
        exc = task.exception()
        if exc is not None:
            log.error(
                "Send to %s raised",
                self._notifier.name,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
            return
        result = task.result()
        if not result.ok:
            log.error(
                "Send to %s failed (status=%s): %s",
                self._notifier.name,
                result.status_code,
                result.error,
            )
