"""Core enumerations for output formats and lifecycle states.

Architecture:
    Two independent state machines exist in a tailing session. The tailer owns
    ``RunState`` and never shares it; the WebSocket transport owns
    ``ConnectionState``. Neither component observes the other's state directly.

Design Decisions:
    - String enums: values double as CLI choices and log fields
    - Terminal states (``STOPPED``) are never left once entered
"""

from enum import Enum


class OutputFormat(str, Enum):
    """How request log events are rendered."""

    HUMAN = "human"
    JSON = "json"

    @classmethod
    def from_value(cls, value: "OutputFormat | str") -> "OutputFormat":
        """Parse a format name case-insensitively.

        Raises:
            ValueError: If the name is not a known format
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown output format {value!r} (expected one of: {choices})") from None


class RunState(str, Enum):
    """Lifecycle of a single tailer run."""

    IDLE = "idle"
    AUTHORIZING = "authorizing"
    STREAMING = "streaming"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class ConnectionState(str, Enum):
    """Lifecycle of the streaming transport.

    ``CONNECTING -> CONNECTED -> STREAMING``, any connection loss moves to
    ``RECONNECTING`` which returns to ``CONNECTING`` after the fixed delay.
    ``STOPPED`` is terminal and only reachable through an explicit stop.
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    STREAMING = "streaming"
    RECONNECTING = "reconnecting"
    STOPPED = "stopped"

    @property
    def is_terminal(self) -> bool:
        return self is ConnectionState.STOPPED
