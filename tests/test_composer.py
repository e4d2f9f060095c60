"""Tests for NotificationComposer payloads."""

from datetime import timedelta

import pytest

from core.composer import NotificationComposer
from models.event import Entry, EventKind, Service
from tests.conftest import NOW, epoch_ms


@pytest.fixture
def composer() -> NotificationComposer:
    return NotificationComposer(base_url="https://watchmen.example.com/", now=lambda: NOW)


def _texts(payload):
    return [b["text"]["text"] for b in payload["attachments"][0]["blocks"]]


class TestCompose:
    def test_empty_entries_produce_nothing(self, composer):
        assert composer.compose(EventKind.NEW_OUTAGE, []) is None
        assert composer.compose(EventKind.SERVICE_BACK, [], ongoing_outages=3) is None

    def test_new_outage_message(self, composer, service_a, service_b):
        entries = [
            Entry(service_a, {"timestamp": epoch_ms(NOW - timedelta(minutes=3))}),
            Entry(service_b, {"timestamp": epoch_ms(NOW - timedelta(seconds=5))}),
        ]

        payload = composer.compose(EventKind.NEW_OUTAGE, entries)

        attachment = payload["attachments"][0]
        assert payload["text"] == "\n"
        assert attachment["color"] == "#FA4F37"
        assert _texts(payload) == [
            "*New Outages*",
            ":server: A (https://a.example.com) - 3 minutes ago",
            ":server: B (https://b.example.com) - a few seconds ago",
        ]

    def test_entry_has_view_button(self, composer, service_a):
        payload = composer.compose(EventKind.NEW_OUTAGE, [Entry(service_a, {"timestamp": epoch_ms(NOW)})])

        accessory = payload["attachments"][0]["blocks"][1]["accessory"]
        assert accessory["type"] == "button"
        assert accessory["text"]["text"] == "View"
        assert accessory["url"] == "https://watchmen.example.com/services/1/view"

    def test_outage_message_never_has_summary(self, composer, service_a):
        payload = composer.compose(
            EventKind.NEW_OUTAGE,
            [Entry(service_a, {"timestamp": epoch_ms(NOW)})],
            ongoing_outages=4,
        )
        assert len(payload["attachments"][0]["blocks"]) == 2

    def test_service_back_reports_downtime(self, composer, service_a):
        entries = [Entry(service_a, {"timestamp": epoch_ms(NOW - timedelta(hours=2))})]

        payload = composer.compose(EventKind.SERVICE_BACK, entries)

        assert payload["attachments"][0]["color"] == "#79C580"
        assert _texts(payload) == ["*Services are back*", ":server: A (Down for 2 hours)"]

    @pytest.mark.parametrize(
        ("count", "expected"),
        [
            (1, "Currently there is still 1 outage."),
            (3, "Currently there are still 3 outages."),
        ],
    )
    def test_service_back_summary(self, composer, service_a, count, expected):
        payload = composer.compose(
            EventKind.SERVICE_BACK,
            [Entry(service_a, {"timestamp": epoch_ms(NOW)})],
            ongoing_outages=count,
        )
        assert _texts(payload)[-1] == expected

    def test_malformed_entries_degrade(self, composer, service_a, service_b):
        entries = [
            Entry(service_a, {}),
            Entry(service_b, "garbage"),
            Entry(Service(id="3", name="C"), {"timestamp": epoch_ms(NOW - timedelta(minutes=10))}),
        ]

        outage = composer.compose(EventKind.NEW_OUTAGE, entries)
        back = composer.compose(EventKind.SERVICE_BACK, entries)

        assert _texts(outage)[1:] == [
            ":server: A (https://a.example.com)",
            ":server: B (https://b.example.com)",
            ":server: C () - 10 minutes ago",
        ]
        assert _texts(back)[1:] == [":server: A", ":server: B", ":server: C (Down for 10 minutes)"]

    def test_non_reconciling_kind_rejected(self, composer, service_a):
        with pytest.raises(ValueError):
            composer.compose(EventKind.SERVICE_OK, [Entry(service_a, {})])


def test_compose_immediate(composer, service_a):
    payload = composer.compose_immediate(EventKind.LATENCY_WARNING, service_a)
    assert payload == {"text": "[Latency Warning] on A https://a.example.com"}


def test_custom_view_template(service_a):
    composer = NotificationComposer(
        base_url="https://w.example.com",
        view_url_template="{base_url}/#/{service_id}",
    )
    assert composer.view_url(service_a) == "https://w.example.com/#/1"
