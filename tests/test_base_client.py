"""Tests for the shared upstream client."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from gamescout.core.base_client import BaseWebClient
from gamescout.core.errors import UpstreamTransportError


def _session(response=None, enter_error=None) -> MagicMock:
    """A session whose request() context manager yields `response` or raises `enter_error`."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response, side_effect=enter_error)
    context.__aexit__ = AsyncMock(return_value=False)
    session = MagicMock()
    session.request = MagicMock(return_value=context)
    return session


def _response(json_data=None, text="", status_error=None) -> MagicMock:
    response = MagicMock()
    response.raise_for_status = MagicMock(side_effect=status_error)
    response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)
    return response


class TestFetch:
    """Tests for BaseWebClient._fetch."""

    @pytest.mark.asyncio
    async def test_json(self) -> None:
        """Test JSON bodies are decoded."""
        client = BaseWebClient(_session(_response(json_data={"ok": True})))
        assert await client._fetch("https://api.test") == {"ok": True}

    @pytest.mark.asyncio
    async def test_text_and_request_shape(self) -> None:
        """Test text bodies and that method, params and payload are forwarded."""
        session = _session(_response(text="data: {}"))
        client = BaseWebClient(session, timeout=5)
        body = await client._fetch("https://api.test", method="POST", is_json=False,
                                   params={"q": "x"}, payload={"url": "u"})
        assert body == "data: {}"
        args, kwargs = session.request.call_args
        assert args == ("POST", "https://api.test")
        assert kwargs["params"] == {"q": "x"}
        assert kwargs["json"] == {"url": "u"}
        assert kwargs["timeout"].total == 5

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        """Test non-2xx statuses become UpstreamTransportError."""
        error = aiohttp.ClientResponseError(MagicMock(), (), status=503, message="Service Unavailable")
        client = BaseWebClient(_session(_response(status_error=error)))
        with pytest.raises(UpstreamTransportError) as exc_info:
            await client._fetch("https://api.test")
        assert "503" in exc_info.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()])
    async def test_network_errors(self, error) -> None:
        """Test connection failures and timeouts become UpstreamTransportError without retrying."""
        session = _session(enter_error=error)
        client = BaseWebClient(session)
        with pytest.raises(UpstreamTransportError):
            await client._fetch("https://api.test")
        assert session.request.call_count == 1
