"""Auto-reconnecting WebSocket transport for a single streaming session.

Architecture:
    Two background tasks per transport:
    - connect loop: connects, receives and parses frames, reconnects after a
      fixed delay on any connection loss
    - dispatch loop: drains a bounded queue and invokes ``on_message``

    The bounded queue is the only hand-off between the two, so a slow or
    failing handler can never corrupt reconnect timing, and frames keep their
    arrival order across reconnects.

State machine (see ``ConnectionState``):
    IDLE -> CONNECTING -> CONNECTED -> STREAMING
    CONNECTING/CONNECTED/STREAMING -> RECONNECTING on connection loss
    RECONNECTING -> CONNECTING after ``reconnect_interval``
    any -> STOPPED via ``stop()`` only; never left afterwards

Reconnect policy:
    Fixed interval, no backoff, no attempt cap. The transport retries until
    explicitly stopped.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from urllib.parse import quote

import websockets
from websockets.exceptions import ConnectionClosed

from ...constants import USER_AGENT
from ...core.enums import ConnectionState
from ...core.exceptions import MessageParseError, TransportError
from ...models.messages import IncomingMessage, parse_incoming_message

logger = logging.getLogger(__name__)

MessageHandler = Callable[[IncomingMessage], Awaitable[None]] | Callable[[IncomingMessage], None]


@dataclass(frozen=True)
class TransportConfig:
    """Connection and delivery settings.

    ``reconnect_interval`` comes from the session descriptor; the ping and
    frame-size settings are handed to ``websockets.connect`` as-is.
    """

    reconnect_interval: float = 60.0
    allow_unencrypted: bool = False
    ping_interval: float | None = 30
    ping_timeout: float | None = 10
    open_timeout: float | None = 10
    max_size: int | None = 2**20
    max_queue: int | None = 1024
    queue_size: int = 1000
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if self.reconnect_interval < 0:
            raise ValueError("reconnect_interval must be >= 0")
        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")


@dataclass
class TransportMetrics:
    """Counters for one transport's lifetime."""

    connections: int = 0
    reconnect_attempts: int = 0
    frames_received: int = 0
    frames_dropped: int = 0
    messages_delivered: int = 0
    handler_errors: int = 0
    last_message_time: datetime | None = None


def build_connect_url(url: str, feature: str, *, allow_unencrypted: bool = False) -> str:
    """Scope ``url`` to ``feature``, downgrading to ``ws://`` when allowed."""
    if allow_unencrypted and url.startswith("wss://"):
        url = "ws://" + url[len("wss://") :]
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}websocket_feature={quote(feature, safe='')}"


class WebSocketTransport:
    """Maintain one feature-scoped WebSocket connection keyed by a session id."""

    def __init__(
        self,
        url: str,
        websocket_id: str,
        websocket_feature: str,
        config: TransportConfig | None = None,
        *,
        on_message: MessageHandler,
    ) -> None:
        self.url = url
        self.websocket_id = websocket_id
        self.websocket_feature = websocket_feature
        self.on_message = on_message
        self._conf = config or TransportConfig()

        self._state = ConnectionState.IDLE
        self._ws: Any = None
        self._queue: asyncio.Queue[IncomingMessage] = asyncio.Queue(maxsize=self._conf.queue_size)
        self._task: asyncio.Task[None] | None = None
        self._dispatch_task: asyncio.Task[None] | None = None
        self._stopping = False
        self._stopped = asyncio.Event()
        self._metrics = TransportMetrics()

    # ----------------------
    # Introspection
    # ----------------------
    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state in (ConnectionState.CONNECTED, ConnectionState.STREAMING)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def connect_url(self) -> str:
        return build_connect_url(
            self.url, self.websocket_feature, allow_unencrypted=self._conf.allow_unencrypted
        )

    @property
    def metrics(self) -> TransportMetrics:
        return self._metrics

    def _set_state(self, state: ConnectionState) -> None:
        if self._state.is_terminal:
            return
        if state is not self._state:
            logger.debug(f"WebSocket {self.websocket_id}: {self._state.value} -> {state.value}")
            self._state = state

    def _connect_kwargs(self) -> dict[str, Any]:
        return {
            "additional_headers": {
                "Accept-Encoding": "identity",
                "Websocket-Id": self.websocket_id,
            },
            "user_agent_header": self._conf.user_agent,
            "ping_interval": self._conf.ping_interval,
            "ping_timeout": self._conf.ping_timeout,
            "open_timeout": self._conf.open_timeout,
            "max_size": self._conf.max_size,
            "max_queue": self._conf.max_queue,
        }

    # ----------------------
    # Lifecycle
    # ----------------------
    async def start(self) -> None:
        """Spawn the connect and dispatch loops and return immediately.

        Calling ``start()`` on a running transport is a no-op.

        Raises:
            TransportError: If the transport was already stopped
        """
        if self._stopping:
            raise TransportError("Transport has been stopped and cannot be restarted")
        if self._task is not None:
            return

        self._dispatch_task = asyncio.create_task(self._dispatch_loop(), name="logtail-dispatch")
        self._task = asyncio.create_task(self._run(), name="logtail-transport")
        logger.debug(f"WebSocket transport started for {self.url}")

    async def stop(self) -> None:
        """Stop for good: cancel any wait, close the socket, end both loops.

        Idempotent and safe to call concurrently; every caller returns only
        once no further ``on_message`` invocation can happen.
        """
        if self._stopping:
            await self._stopped.wait()
            return

        self._stopping = True
        self._state = ConnectionState.STOPPED

        ws, self._ws = self._ws, None
        current = asyncio.current_task()
        tasks = [t for t in (self._task, self._dispatch_task) if t is not None and t is not current]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        if ws is not None:
            with suppress(Exception):
                await ws.close()

        self._stopped.set()
        logger.debug(f"WebSocket transport stopped for {self.url}")

    async def wait(self) -> BaseException | None:
        """Block until a background loop terminates.

        Returns:
            The exception that ended the loop, or ``None`` if it was cancelled
            or returned normally

        Raises:
            TransportError: If the transport was never started
        """
        if self._task is None or self._dispatch_task is None:
            raise TransportError("Transport has not been started")

        done, _ = await asyncio.wait(
            {self._task, self._dispatch_task}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                return task.exception()
        return None

    # ----------------------
    # Loops
    # ----------------------
    async def _run(self) -> None:
        while not self._stopping:
            self._set_state(ConnectionState.CONNECTING)
            try:
                async with websockets.connect(self.connect_url, **self._connect_kwargs()) as ws:
                    self._ws = ws
                    self._metrics.connections += 1
                    self._set_state(ConnectionState.CONNECTED)
                    logger.debug(f"Connected to {self.url} (websocket_id={self.websocket_id})")
                    await self._receive(ws)
                logger.warning("WebSocket connection closed by server, reconnecting...")
            except asyncio.CancelledError:
                raise
            except ConnectionClosed as e:
                logger.warning(f"WebSocket connection closed ({e}), reconnecting...")
            except Exception as e:  # noqa: BLE001
                logger.error(f"WebSocket error: {e}")
            finally:
                self._ws = None

            if self._stopping:
                break
            self._set_state(ConnectionState.RECONNECTING)
            self._metrics.reconnect_attempts += 1
            logger.debug(f"Reconnecting in {self._conf.reconnect_interval}s")
            await asyncio.sleep(self._conf.reconnect_interval)

    async def _receive(self, ws: Any) -> None:
        self._set_state(ConnectionState.STREAMING)
        async for raw in ws:
            self._metrics.frames_received += 1
            try:
                message = parse_incoming_message(raw)
            except MessageParseError as e:
                self._metrics.frames_dropped += 1
                logger.warning(f"Dropping unparseable frame: {e}")
                continue
            # Blocks when the dispatcher falls behind
            await self._queue.put(message)

    async def _dispatch_loop(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                result = self.on_message(message)
                if inspect.isawaitable(result):
                    await result
                self._metrics.messages_delivered += 1
                self._metrics.last_message_time = datetime.now()
            except asyncio.CancelledError:
                raise
            except Exception as e:  # noqa: BLE001
                self._metrics.handler_errors += 1
                logger.error(f"Message handler failed: {e}", exc_info=True)
            finally:
                self._queue.task_done()

    async def __aenter__(self) -> WebSocketTransport:
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.stop()
