"""High-level clients."""

from .dispatcher import EventDispatcher, format_request_log, status_style
from .tailer import Tailer

__all__ = ["EventDispatcher", "Tailer", "format_request_log", "status_style"]
