from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a single delivery attempt."""

    ok: bool
    status_code: int | None = None
    error: str | None = None


class Notifier(ABC):
    """Abstract base for chat delivery adapters.

    A notifier is handed a fully formatted payload and is responsible only
    for delivering it. Failures are reported through ``DeliveryResult``
    rather than raised; there is no retry.

    A shared ``httpx.AsyncClient`` is injected at construction time so
    that every send reuses one connection pool.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable destination name (e.g. 'Slack')."""

    @abstractmethod
    async def send(self, payload: dict[str, Any]) -> DeliveryResult:
        """Deliver one message payload."""
