"""Core components."""

from .config import TailerConfig
from .enums import ConnectionState, OutputFormat, RunState
from .exceptions import (
    AuthorizationError,
    MessageParseError,
    PayloadDecodeError,
    TailError,
    TransportError,
)

__all__ = [
    "TailerConfig",
    "OutputFormat",
    "RunState",
    "ConnectionState",
    "TailError",
    "AuthorizationError",
    "TransportError",
    "MessageParseError",
    "PayloadDecodeError",
]
