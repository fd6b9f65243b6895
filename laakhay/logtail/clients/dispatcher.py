"""Render inbound request log events to the console."""

from __future__ import annotations

import logging

from rich.text import Text

from ..core.enums import OutputFormat
from ..core.exceptions import PayloadDecodeError
from ..io.console import ConsoleSink
from ..models.messages import EventPayload, IncomingMessage, RequestLogEvent

logger = logging.getLogger(__name__)


def status_style(status: int) -> str:
    """Rich style for an HTTP status code."""
    if status >= 500:
        return "bold red"
    if status >= 400:
        return "bold yellow"
    return "bold green"


def format_request_log(payload: EventPayload) -> Text:
    """``<created_at> [<status>] <method> <url> <request_id>`` with a styled status."""
    return Text.assemble(
        payload.created_at,
        " [",
        (str(payload.status), status_style(payload.status)),
        "] ",
        payload.method,
        " ",
        payload.url,
        " ",
        payload.request_id,
    )


class EventDispatcher:
    """Transport callback turning request log events into console lines.

    Never raises: anything that goes wrong is logged and the event skipped,
    so the transport's delivery loop keeps going.
    """

    def __init__(
        self,
        output_format: OutputFormat | str = OutputFormat.HUMAN,
        sink: ConsoleSink | None = None,
        *,
        log: logging.Logger | None = None,
    ) -> None:
        self.output_format = OutputFormat.from_value(output_format)
        self.sink = sink or ConsoleSink()
        self._log = log or logger

    def __call__(self, message: IncomingMessage) -> None:
        try:
            self.dispatch(message)
        except Exception as e:  # noqa: BLE001
            self._log.error(f"Failed to render request log event: {e}", exc_info=True)

    def dispatch(self, message: IncomingMessage) -> None:
        if not isinstance(message, RequestLogEvent):
            self._log.warning(
                f"WebSocket specified for request logs received non-request-logs event "
                f"({getattr(message, 'type', type(message).__name__)})"
            )
            return

        self._log.debug(f"Processing request log event {message.request_log_id}")

        if self.output_format is OutputFormat.JSON:
            self._render_json(message)
            return

        try:
            payload = EventPayload.from_json(message.event_payload)
        except PayloadDecodeError as e:
            self._log.warning(f"Received malformed payload: {e}")
            payload = e.partial or EventPayload()

        self.sink.print_line(format_request_log(payload))

    def _render_json(self, message: RequestLogEvent) -> None:
        try:
            self.sink.print_json(message.event_payload)
        except ValueError as e:
            self._log.warning(f"Received malformed payload: {e}")
            self.sink.print_line(message.event_payload)
