"""Rich-backed console output shared by the status spinner and the dispatcher.

Every write holds one lock so status lines and event lines never interleave
mid-line. Colour is decided by Rich (TTY detection, ``NO_COLOR``) unless
``no_color`` forces it off.
"""

from __future__ import annotations

import threading
from typing import IO

from rich.console import Console
from rich.status import Status
from rich.text import Text


class ConsoleSink:
    """Line-atomic writer for event output (stdout) and status text (stderr)."""

    def __init__(
        self,
        console: Console | None = None,
        *,
        status_console: Console | None = None,
        no_color: bool = False,
        file: IO[str] | None = None,
    ) -> None:
        self.console = console or Console(
            file=file, no_color=no_color, highlight=False, soft_wrap=True
        )
        self.status_console = status_console or Console(
            stderr=True, no_color=no_color, highlight=False
        )
        self._lock = threading.Lock()

    def print_line(self, line: str | Text) -> None:
        with self._lock:
            self.console.print(line, markup=False, emoji=False, highlight=False)

    def print_json(self, raw: str) -> None:
        """Pretty-print a JSON document.

        Raises:
            ValueError: If ``raw`` is not valid JSON
        """
        with self._lock:
            self.console.print_json(raw)

    def start_spinner(self, message: str) -> Status:
        status = self.status_console.status(message, spinner="dots")
        status.start()
        return status

    def stop_spinner(self, status: Status | None, message: str | None = None) -> None:
        with self._lock:
            if status is not None:
                status.stop()
            if message:
                self.status_console.print(message, markup=False, highlight=False)
