"""Laakhay Logtail - live API request log tailing over an auto-reconnecting WebSocket."""

__version__ = "0.1.0"

from .clients import EventDispatcher, Tailer, format_request_log, status_style  # noqa: E402
from .core import (  # noqa: E402
    AuthorizationError,
    ConnectionState,
    MessageParseError,
    OutputFormat,
    PayloadDecodeError,
    RunState,
    TailerConfig,
    TailError,
    TransportError,
)
from .io import ConsoleSink  # noqa: E402
from .models import (  # noqa: E402
    EventPayload,
    IncomingMessage,
    RequestLogEvent,
    SessionDescriptor,
    WebhookEvent,
    parse_incoming_message,
)
from .runtime import (  # noqa: E402
    SessionAuthorizer,
    ShutdownSignal,
    TransportConfig,
    WebSocketTransport,
)

__all__ = [
    "__version__",
    # Clients
    "Tailer",
    "EventDispatcher",
    "format_request_log",
    "status_style",
    # Core
    "TailerConfig",
    "OutputFormat",
    "RunState",
    "ConnectionState",
    "TailError",
    "AuthorizationError",
    "TransportError",
    "MessageParseError",
    "PayloadDecodeError",
    # Models
    "SessionDescriptor",
    "IncomingMessage",
    "RequestLogEvent",
    "WebhookEvent",
    "EventPayload",
    "parse_incoming_message",
    # Runtime
    "SessionAuthorizer",
    "ShutdownSignal",
    "TransportConfig",
    "WebSocketTransport",
    "ConsoleSink",
]
