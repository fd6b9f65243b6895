"""Control-plane client issuing WebSocket session descriptors."""

from __future__ import annotations

import asyncio
import logging

import aiohttp
from pydantic import ValidationError

from ...constants import DEFAULT_API_BASE_URL, SESSIONS_PATH, USER_AGENT
from ...core.exceptions import AuthorizationError
from ...models.session import SessionDescriptor
from .http import HTTPClient, HTTPError

logger = logging.getLogger(__name__)


class SessionAuthorizer:
    """Exchange an API key for a streaming session descriptor.

    A single request per call, no retries. Any failure surfaces as
    :class:`AuthorizationError`.
    """

    def __init__(
        self,
        api_key: str,
        *,
        api_base_url: str = DEFAULT_API_BASE_URL,
        http: HTTPClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self.api_base_url = api_base_url.rstrip("/")
        self._owns_http = http is None
        self._http = http or HTTPClient(base_url=self.api_base_url, timeout=timeout)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "User-Agent": USER_AGENT,
        }

    async def authorize(self, device_name: str, feature: str) -> SessionDescriptor:
        """Request a session scoped to ``feature`` for ``device_name``.

        Raises:
            AuthorizationError: On HTTP errors, network failures, a body that
                is not JSON, or an unexpected session descriptor
        """
        form = [("device_name", device_name), ("websocket_features[]", feature)]
        logger.debug(f"Authorizing session for device {device_name!r} with feature {feature!r}")

        try:
            body = await self._http.post(SESSIONS_PATH, data=form, headers=self._headers())
        except HTTPError as e:
            raise AuthorizationError(
                f"Authorization rejected with status {e.status}",
                status_code=e.status,
                body=e.body,
            ) from e
        except asyncio.CancelledError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AuthorizationError(f"Authorization request failed: {e}") from e
        except ValueError as e:
            raise AuthorizationError("Authorization response is not valid JSON") from e

        if not isinstance(body, dict):
            raise AuthorizationError("Authorization response is not a JSON object")

        try:
            session = SessionDescriptor.model_validate(body)
        except ValidationError as e:
            raise AuthorizationError(f"Invalid session descriptor: {e}") from e

        logger.debug(
            f"Authorized session {session.websocket_id} for feature "
            f"{session.websocket_authorized_feature} (reconnect delay {session.reconnect_delay}s)"
        )
        return session

    async def close(self) -> None:
        if self._owns_http:
            await self._http.close()

    async def __aenter__(self) -> SessionAuthorizer:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
