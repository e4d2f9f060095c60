from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

log = logging.getLogger(__name__)

DEFAULT_WINDOW_MS = 30_000


class Debouncer:
    """Collapses repeated triggers into one trailing call of ``action``.

    Every ``trigger()`` cancels the previously scheduled call and schedules a
    new one ``window_ms`` later, so ``action`` runs once per quiet window.
    The single ``asyncio.TimerHandle`` is the only pending invocation that
    can exist at any time.

    ``action`` takes no arguments; it reads whatever state it needs when it
    fires. Must be triggered from within a running event loop.
    """

    def __init__(
        self,
        action: Callable[[], object],
        window_ms: int = DEFAULT_WINDOW_MS,
    ) -> None:
        if window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {window_ms}")
        self._action = action
        self._window_ms = window_ms
        self._handle: asyncio.TimerHandle | None = None

    @property
    def window_ms(self) -> int:
        return self._window_ms

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """(Re)arm the timer; the pending call, if any, is cancelled."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._window_ms / 1000, self._fire)

    reset = trigger

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def fire_now(self) -> None:
        """Run a pending call immediately instead of waiting for the window."""
        if self._handle is None:
            return
        self.cancel()
        self._fire()

    def _fire(self) -> None:
        self._handle = None
        try:
            self._action()
        except Exception:
            log.exception("Debounced action %r failed", self._action)


def debounce(
    action: Callable[[], object],
    window_ms: int = DEFAULT_WINDOW_MS,
) -> Callable[[], None]:
    """Wrap ``action`` and return its trigger function."""
    return Debouncer(action, window_ms).trigger
