"""Console I/O."""

from .console import ConsoleSink

__all__ = ["ConsoleSink"]
