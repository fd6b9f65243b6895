"""Data models."""

from .messages import (
    EventPayload,
    IncomingMessage,
    RequestLogEvent,
    WebhookEvent,
    parse_incoming_message,
)
from .session import SessionDescriptor

__all__ = [
    "SessionDescriptor",
    "IncomingMessage",
    "RequestLogEvent",
    "WebhookEvent",
    "EventPayload",
    "parse_incoming_message",
]
