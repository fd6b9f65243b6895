"""Runtime layer: control-plane client, streaming transport and signals."""

from .rest import HTTPClient, HTTPError, SessionAuthorizer
from .signals import ShutdownSignal
from .ws import TransportConfig, TransportMetrics, WebSocketTransport

__all__ = [
    "HTTPClient",
    "HTTPError",
    "SessionAuthorizer",
    "ShutdownSignal",
    "TransportConfig",
    "TransportMetrics",
    "WebSocketTransport",
]
