"""Unit tests for HTTPClient.

Tests focus on session management and POST error handling.
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from laakhay.logtail.runtime.rest import HTTPClient, HTTPError


def _mock_session(status: int, *, json_body=None, text_body: str = "") -> MagicMock:
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=json_body)
    mock_response.text = AsyncMock(return_value=text_body)
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)

    mock_session = MagicMock()
    mock_session.closed = False  # session property checks this
    mock_session.post = MagicMock(return_value=mock_response)
    return mock_session


class TestHTTPClientSessionManagement:
    def test_init(self):
        client = HTTPClient(timeout=10.0)
        assert client.timeout.total == 10.0
        assert client._session is None

    def test_init_strips_base_url(self):
        client = HTTPClient(base_url="https://api.example.com/")
        assert client.base_url == "https://api.example.com"

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        client = HTTPClient()
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert client._session is session
        await client.close()

    @pytest.mark.asyncio
    async def test_session_property_recreates_closed_session(self):
        client = HTTPClient()
        session1 = client.session
        await session1.close()

        session2 = client.session
        assert session1 is not session2
        assert not session2.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        client = HTTPClient()
        await client.close()
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        async with HTTPClient() as client:
            assert client.session is not None
        assert client._session is None or client._session.closed


class TestHTTPClientPost:
    @pytest.mark.asyncio
    async def test_post_resolves_relative_url(self):
        client = HTTPClient(base_url="https://api.example.com")
        client._session = _mock_session(200, json_body={"ok": True})

        result = await client.post("/v1/things", data=[("a", "b")], headers={"X": "1"})

        assert result == {"ok": True}
        client._session.post.assert_called_once_with(
            "https://api.example.com/v1/things", data=[("a", "b")], headers={"X": "1"}
        )

    @pytest.mark.asyncio
    async def test_post_keeps_absolute_url(self):
        client = HTTPClient(base_url="https://api.example.com")
        client._session = _mock_session(200, json_body={})

        await client.post("https://other.example.com/x")

        assert client._session.post.call_args[0][0] == "https://other.example.com/x"

    @pytest.mark.asyncio
    async def test_post_raises_http_error(self):
        client = HTTPClient()
        client._session = _mock_session(401, text_body='{"error": "invalid api key"}')

        with pytest.raises(HTTPError) as info:
            await client.post("https://api.example.com/v1/things")

        assert info.value.status == 401
        assert "invalid api key" in info.value.body

    @pytest.mark.asyncio
    async def test_post_non_json_body_raises_value_error(self):
        client = HTTPClient()
        client._session = _mock_session(200)
        client._session.post.return_value.json.side_effect = json.JSONDecodeError(
            "Expecting value", "<html>", 0
        )

        with pytest.raises(ValueError):
            await client.post("https://api.example.com/v1/things")
