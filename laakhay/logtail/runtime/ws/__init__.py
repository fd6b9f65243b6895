"""Runtime WebSocket helpers."""

from .transport import (
    MessageHandler,
    TransportConfig,
    TransportMetrics,
    WebSocketTransport,
    build_connect_url,
)

__all__ = [
    "MessageHandler",
    "TransportConfig",
    "TransportMetrics",
    "WebSocketTransport",
    "build_connect_url",
]
