"""Tailer: the top-level request log tailing session.

Lifecycle of one run:
    1. spinner on, SIGINT/SIGTERM routed to the tailer's ShutdownSignal
    2. authorize once against the control plane (failure is fatal, no retry)
    3. build exactly one WebSocketTransport from the session descriptor and
       start it in the background
    4. spinner replaced by the ready message
    5. wait for a shutdown request or for the transport to die
    6. stop the transport, remove signal handlers

Only authorization errors and an unexpected transport death leave ``run()``
as exceptions; everything else is absorbed where it happens.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from ..core.config import TailerConfig
from ..core.enums import RunState
from ..core.exceptions import AuthorizationError, TransportError
from ..io.console import ConsoleSink
from ..models.session import SessionDescriptor
from ..runtime.rest.authorizer import SessionAuthorizer
from ..runtime.signals import ShutdownSignal
from ..runtime.ws.transport import MessageHandler, TransportConfig, WebSocketTransport
from .dispatcher import EventDispatcher

GETTING_READY_MESSAGE = "Getting ready..."
READY_MESSAGE = "Ready! You're now waiting to receive API request logs (^C to quit)"

TransportFactory = Callable[..., WebSocketTransport]


class Tailer:
    """Run one log tailing session from authorization to shutdown."""

    def __init__(
        self,
        config: TailerConfig,
        *,
        authorizer: SessionAuthorizer | None = None,
        sink: ConsoleSink | None = None,
        dispatcher: MessageHandler | None = None,
        shutdown: ShutdownSignal | None = None,
        transport_factory: TransportFactory = WebSocketTransport,
        transport_config: TransportConfig | None = None,
    ) -> None:
        self.config = config
        self._log = config.logger
        self._owns_authorizer = authorizer is None
        self._authorizer = authorizer or SessionAuthorizer(
            config.api_key, api_base_url=config.api_base_url
        )
        self._sink = sink or ConsoleSink()
        self._dispatcher = dispatcher or EventDispatcher(
            config.output_format, self._sink, log=self._log
        )
        self._shutdown = shutdown or ShutdownSignal()
        self._transport_factory = transport_factory
        # Template for everything except what the session decides
        self._transport_config = transport_config or TransportConfig()

        self._state = RunState.IDLE
        self._session: SessionDescriptor | None = None
        self._transport: WebSocketTransport | None = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def session(self) -> SessionDescriptor | None:
        return self._session

    @property
    def transport(self) -> WebSocketTransport | None:
        return self._transport

    def shutdown(self, reason: str = "shutdown requested") -> None:
        """Ask a running session to stop. Idempotent."""
        self._shutdown.set(reason)

    async def run(self) -> None:
        """Authorize, stream until told to stop, then shut down in order.

        Raises:
            AuthorizationError: If the session could not be authorized
            TransportError: If the streaming transport terminated on its own
            RuntimeError: If the tailer has already been run
        """
        if self._state is not RunState.IDLE:
            raise RuntimeError("Tailer instances are single-use")

        spinner = self._sink.start_spinner(GETTING_READY_MESSAGE)
        self._shutdown.install()
        failure: BaseException | None = None
        try:
            self._state = RunState.AUTHORIZING
            try:
                session = await self._authorize()
            except AuthorizationError as e:
                self._sink.stop_spinner(spinner)
                spinner = None
                self._log.error(f"Error while authenticating: {e}")
                raise

            self._transport = self._build_transport(session)
            await self._transport.start()
            self._state = RunState.STREAMING

            self._sink.stop_spinner(spinner, READY_MESSAGE)
            spinner = None

            failure = await self._wait_for_shutdown()
        finally:
            if spinner is not None:
                self._sink.stop_spinner(spinner)
            self._state = RunState.SHUTTING_DOWN
            if self._transport is not None:
                await self._transport.stop()
            self._shutdown.uninstall()
            self._state = RunState.STOPPED
            self._log.debug("Bye!")

        if failure is not None:
            raise TransportError(f"Streaming transport terminated unexpectedly: {failure}") from failure

    async def _authorize(self) -> SessionDescriptor:
        try:
            session = await self._authorizer.authorize(
                self.config.device_name, self.config.websocket_feature
            )
        finally:
            if self._owns_authorizer:
                await self._authorizer.close()
        self._session = session
        return session

    def _build_transport(self, session: SessionDescriptor) -> WebSocketTransport:
        transport_config = replace(
            self._transport_config,
            reconnect_interval=session.reconnect_interval,
            allow_unencrypted=self.config.no_wss,
        )
        return self._transport_factory(
            session.websocket_url,
            session.websocket_id,
            session.websocket_authorized_feature,
            transport_config,
            on_message=self._dispatcher,
        )

    async def _wait_for_shutdown(self) -> BaseException | None:
        """Block until shutdown is requested or the transport dies.

        Returns:
            ``None`` on a requested shutdown, otherwise what ended the transport
        """
        assert self._transport is not None
        signal_wait: asyncio.Task[Any] = asyncio.create_task(self._shutdown.wait())
        transport_wait: asyncio.Task[Any] = asyncio.create_task(self._transport.wait())
        try:
            done, _ = await asyncio.wait(
                {signal_wait, transport_wait}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (signal_wait, transport_wait):
                if not task.done():
                    task.cancel()
            await asyncio.gather(signal_wait, transport_wait, return_exceptions=True)

        if signal_wait in done:
            self._log.debug(f"{signal_wait.result()} received, cleaning up...")
            return None

        exc = transport_wait.result()
        self._log.error("Streaming transport terminated unexpectedly")
        return exc or TransportError("transport loop exited")
