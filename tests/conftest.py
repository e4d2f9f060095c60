"""Shared fixtures: a recording notifier and a few services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx
import pytest
import pytest_asyncio

from models.event import Service
from notifiers.base import DeliveryResult, Notifier

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class RecordingNotifier(Notifier):
    """Notifier that keeps every payload instead of sending it."""

    def __init__(self, client: httpx.AsyncClient, fail_on: set[str] | None = None) -> None:
        super().__init__(client)
        self.sent: list[dict[str, Any]] = []
        self._fail_on = fail_on or set()

    @property
    def name(self) -> str:
        return "Recording"

    async def send(self, payload: dict[str, Any]) -> DeliveryResult:
        self.sent.append(payload)
        header = _header_text(payload)
        if header in self._fail_on:
            raise RuntimeError(f"boom on {header}")
        return DeliveryResult(ok=True, status_code=200)


def _header_text(payload: dict[str, Any]) -> str | None:
    attachments = payload.get("attachments")
    if not attachments:
        return None
    return attachments[0]["blocks"][0]["text"]["text"]


@pytest_asyncio.fixture
async def http_client():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def notifier(http_client) -> RecordingNotifier:
    return RecordingNotifier(http_client)


@pytest.fixture
def service_a() -> Service:
    return Service(id="1", name="A", url="https://a.example.com")


@pytest.fixture
def service_b() -> Service:
    return Service(id="2", name="B", url="https://b.example.com")
