"""Custom exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.messages import EventPayload


class TailError(Exception):
    """Base exception for all log tailing errors."""

    pass


class AuthorizationError(TailError):
    """Session authorization against the control plane failed.

    Fatal for a run: the tailer never retries authorization.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TransportError(TailError):
    """Streaming transport misuse or unexpected termination."""

    pass


class MessageParseError(TailError):
    """Inbound WebSocket frame could not be turned into a message."""

    def __init__(self, message: str, raw: str | bytes | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class PayloadDecodeError(TailError):
    """Request log event payload is not the expected JSON document."""

    def __init__(self, message: str, partial: EventPayload | None = None) -> None:
        super().__init__(message)
        self.partial = partial
