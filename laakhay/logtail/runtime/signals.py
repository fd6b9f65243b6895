"""Shutdown notification fed by OS signals."""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class ShutdownSignal:
    """Single-slot shutdown notification owned by one tailer.

    The first ``set()`` wins and records its reason; later calls (a second
    Ctrl+C, a SIGTERM racing a SIGINT) are ignored.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._installed: list[signal.Signals] = []

    @property
    def is_set(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def set(self, reason: str = "shutdown") -> bool:
        """Request shutdown. Returns ``True`` only for the call that triggered it."""
        if self._event.is_set():
            return False
        self._reason = reason
        self._event.set()
        return True

    async def wait(self) -> str | None:
        await self._event.wait()
        return self._reason

    def install(self, signals: Iterable[signal.Signals] = DEFAULT_SIGNALS) -> None:
        """Route ``signals`` to :meth:`set` on the running loop."""
        loop = asyncio.get_running_loop()
        self._loop = loop
        for sig in signals:
            try:
                loop.add_signal_handler(sig, self.set, sig.name)
            except (ValueError, OSError, RuntimeError, NotImplementedError):
                # Windows or not in the main thread
                logger.debug(f"Signal handler for {sig.name} not available on this platform")
                continue
            self._installed.append(sig)

    def uninstall(self) -> None:
        if self._loop is None:
            return
        for sig in self._installed:
            try:
                self._loop.remove_signal_handler(sig)
            except (ValueError, OSError, RuntimeError, NotImplementedError):
                pass  # Already removed or loop closed
        self._installed.clear()
        self._loop = None
