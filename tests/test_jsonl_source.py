"""Tests for JsonLinesSource parsing and dispatch."""

import asyncio
import json

import pytest

from models.event import Service
from sources.jsonl import JsonLinesSource


def _line(**obj) -> str:
    return json.dumps(obj) + "\n"


def _reader(*lines: str, eof: bool = True) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data(line.encode("utf-8"))
    if eof:
        reader.feed_eof()
    return reader


class TestJsonLinesSource:
    @pytest.mark.asyncio
    async def test_run_emits_each_event(self):
        source = JsonLinesSource(
            _reader(
                _line(event="new-outage", service={"id": 1, "name": "A", "url": "u"}, data={"timestamp": 5}),
                "\n",
                _line(event="service-ok", service={"id": "2"}),
            )
        )
        seen = []
        source.on("new-outage", lambda s, d: seen.append(("new-outage", s, d)))
        source.on("service-ok", lambda s, d: seen.append(("service-ok", s, d)))

        await source.run()

        assert seen == [
            ("new-outage", Service(id="1", name="A", url="u"), {"timestamp": 5}),
            ("service-ok", Service(id="2", name="2", url=""), {}),
        ]

    @pytest.mark.asyncio
    async def test_run_skips_malformed_and_keeps_going(self):
        source = JsonLinesSource(
            _reader("{broken\n", _line(event="service-ok", service={"id": 3}))
        )
        seen = []
        source.on("service-ok", lambda s, d: seen.append(s.id))

        await source.run()

        assert seen == ["3"]

    @pytest.mark.asyncio
    async def test_cancel_while_waiting_for_input(self):
        source = JsonLinesSource(_reader(eof=False))
        task = asyncio.create_task(source.run())
        await asyncio.sleep(0.01)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "line",
        [
            "{not json",
            _line(service={"id": 1}),
            _line(event="new-outage"),
            _line(event="new-outage", service={"name": "no id"}),
            _line(event="new-outage", service="flat"),
            "[1, 2]",
        ],
    )
    async def test_malformed_lines_are_skipped(self, line):
        source = JsonLinesSource(_reader())
        seen = []
        source.on("new-outage", lambda s, d: seen.append(s))

        assert source.feed(line) is False
        assert seen == []

    @pytest.mark.asyncio
    async def test_non_object_data_replaced(self):
        source = JsonLinesSource(_reader())
        seen = []
        source.on("service-back", lambda s, d: seen.append(d))

        assert source.feed(_line(event="service-back", service={"id": 1}, data=[1]))
        assert seen == [{}]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, caplog):
        source = JsonLinesSource(_reader())
        seen = []

        def explode(service, data):
            raise RuntimeError("handler bug")

        source.on("service-ok", explode)
        source.on("service-ok", lambda s, d: seen.append(s.id))

        assert source.emit("service-ok", Service(id="7", name="x"), {}) == 2
        assert seen == ["7"]
        assert "Handler for service-ok failed" in caplog.text
