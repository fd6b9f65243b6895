"""Unit tests for EventDispatcher rendering."""

from __future__ import annotations

import io
import json
import logging

import pytest
from rich.console import Console

from laakhay.logtail.clients.dispatcher import EventDispatcher, format_request_log, status_style
from laakhay.logtail.core.enums import OutputFormat
from laakhay.logtail.io.console import ConsoleSink
from laakhay.logtail.models import EventPayload, RequestLogEvent, WebhookEvent


def make_sink() -> tuple[ConsoleSink, io.StringIO]:
    out = io.StringIO()
    console = Console(file=out, width=200, no_color=True, highlight=False, soft_wrap=True)
    status_console = Console(file=io.StringIO(), no_color=True)
    return ConsoleSink(console, status_console=status_console), out


def event(payload: dict | str, request_log_id: str = "resp_1") -> RequestLogEvent:
    raw = payload if isinstance(payload, str) else json.dumps(payload)
    return RequestLogEvent(event_payload=raw, request_log_id=request_log_id)


PAYLOAD = {
    "created_at": "2024-05-01 12:00:00",
    "method": "POST",
    "request_id": "req_abc",
    "status": 200,
    "url": "/v1/charges",
}


class TestStatusStyle:
    @pytest.mark.parametrize(
        "status, style",
        [
            (200, "bold green"),
            (201, "bold green"),
            (301, "bold green"),
            (399, "bold green"),
            (400, "bold yellow"),
            (404, "bold yellow"),
            (499, "bold yellow"),
            (500, "bold red"),
            (503, "bold red"),
            (999, "bold red"),
            (0, "bold green"),
        ],
    )
    def test_mapping(self, status, style):
        assert status_style(status) == style


class TestFormatRequestLog:
    def test_plain_text(self):
        text = format_request_log(EventPayload(**PAYLOAD))
        assert text.plain == "2024-05-01 12:00:00 [200] POST /v1/charges req_abc"

    def test_only_status_is_styled(self):
        text = format_request_log(EventPayload(**{**PAYLOAD, "status": 502}))
        assert len(text.spans) == 1
        span = text.spans[0]
        assert text.plain[span.start : span.end] == "502"
        assert span.style == "bold red"


def render_errors(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.levelno >= logging.ERROR]


class TestHumanOutput:
    def test_renders_one_line_per_event(self, caplog):
        sink, out = make_sink()
        dispatcher = EventDispatcher(OutputFormat.HUMAN, sink)

        dispatcher(event(PAYLOAD))

        assert out.getvalue() == "2024-05-01 12:00:00 [200] POST /v1/charges req_abc\n"
        assert not render_errors(caplog)

    def test_n_events_n_lines_in_order(self, caplog):
        sink, out = make_sink()
        dispatcher = EventDispatcher(OutputFormat.HUMAN, sink)

        for i in range(5):
            dispatcher(event({**PAYLOAD, "request_id": f"req_{i}"}))

        lines = out.getvalue().splitlines()
        assert len(lines) == 5
        assert [line.split()[-1] for line in lines] == [f"req_{i}" for i in range(5)]
        assert not render_errors(caplog)

    def test_markup_like_text_printed_verbatim(self, caplog):
        sink, out = make_sink()
        dispatcher = EventDispatcher(OutputFormat.HUMAN, sink)

        dispatcher(event({**PAYLOAD, "url": "/v1/[bold]x[/bold]/:smile:"}))

        assert out.getvalue() == (
            "2024-05-01 12:00:00 [200] POST /v1/[bold]x[/bold]/:smile: req_abc\n"
        )
        assert not render_errors(caplog)

    def test_malformed_payload_does_not_stop_next_event(self, caplog):
        sink, out = make_sink()
        dispatcher = EventDispatcher(OutputFormat.HUMAN, sink)

        with caplog.at_level(logging.WARNING):
            dispatcher(event("{not json"))
            dispatcher(event(PAYLOAD))

        lines = out.getvalue().splitlines()
        assert len(lines) == 2
        assert "[0]" in lines[0]
        assert lines[1] == "2024-05-01 12:00:00 [200] POST /v1/charges req_abc"
        assert "malformed payload" in caplog.text
        assert not render_errors(caplog)

    def test_partially_valid_payload_keeps_good_fields(self, caplog):
        sink, out = make_sink()
        dispatcher = EventDispatcher(OutputFormat.HUMAN, sink)

        dispatcher(event({**PAYLOAD, "status": "not-a-number"}))

        assert "[0] POST /v1/charges req_abc" in out.getvalue()
        assert not render_errors(caplog)


class TestJsonOutput:
    def test_pretty_prints_payload(self, caplog):
        sink, out = make_sink()
        dispatcher = EventDispatcher(OutputFormat.JSON, sink)

        dispatcher(event(PAYLOAD))

        assert json.loads(out.getvalue()) == PAYLOAD
        assert "\n  " in out.getvalue()
        assert not render_errors(caplog)

    def test_invalid_json_printed_raw(self, caplog):
        sink, out = make_sink()
        dispatcher = EventDispatcher("json", sink)

        with caplog.at_level(logging.WARNING):
            dispatcher(event("{oops"))

        assert out.getvalue() == "{oops\n"
        assert "malformed payload" in caplog.text
        assert not render_errors(caplog)


class TestNonRequestLogMessages:
    def test_webhook_event_is_skipped(self, caplog):
        sink, out = make_sink()
        dispatcher = EventDispatcher(OutputFormat.HUMAN, sink)

        with caplog.at_level(logging.WARNING):
            dispatcher(WebhookEvent(webhook_id="wh_1"))

        assert out.getvalue() == ""
        assert "non-request-logs event" in caplog.text


class TestFailureIsolation:
    def test_sink_failure_is_absorbed(self, caplog):
        class BrokenSink(ConsoleSink):
            def print_line(self, line):
                raise OSError("stdout closed")

        dispatcher = EventDispatcher(OutputFormat.HUMAN, BrokenSink(Console(file=io.StringIO())))

        with caplog.at_level(logging.ERROR):
            dispatcher(event(PAYLOAD))

        assert "stdout closed" in caplog.text
