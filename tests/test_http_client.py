"""
Tests for the aiohttp-backed JSON client.

The aiohttp session is mocked; no network access.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from src.askmycar.exceptions import UpstreamError, UpstreamTimeoutError
from src.askmycar.http import HTTPClient


def mock_session(status=200, payload=None, enter_error=None):
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)

    context = MagicMock()
    if enter_error is not None:
        context.__aenter__ = AsyncMock(side_effect=enter_error)
    else:
        context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.get = MagicMock(return_value=context)
    session.close = AsyncMock()
    return session


class TestHTTPClient:
    @pytest.mark.asyncio
    async def test_get_json(self):
        session = mock_session(payload={"ok": True})
        client = HTTPClient("brave", session=session, headers={"User-Agent": "AskMyCar"})

        data = await client.get_json(
            "https://api.example/search",
            params={"q": "camry"},
            headers={"Accept": "application/json"},
        )

        assert data == {"ok": True}
        kwargs = session.get.call_args.kwargs
        assert kwargs["params"] == {"q": "camry"}
        assert kwargs["headers"] == {"User-Agent": "AskMyCar", "Accept": "application/json"}

    @pytest.mark.asyncio
    async def test_error_status(self):
        client = HTTPClient("nhtsa", session=mock_session(status=503))

        with pytest.raises(UpstreamError) as exc_info:
            await client.get_json("https://vpic.example")

        assert exc_info.value.status_code == 503
        assert exc_info.value.recoverable is True

    @pytest.mark.asyncio
    async def test_timeout(self):
        client = HTTPClient(
            "brave", timeout_seconds=4.0, session=mock_session(enter_error=asyncio.TimeoutError())
        )

        with pytest.raises(UpstreamTimeoutError) as exc_info:
            await client.get_json("https://api.example")

        assert exc_info.value.timeout_seconds == 4.0

    @pytest.mark.asyncio
    async def test_connection_error(self):
        client = HTTPClient(
            "wikipedia", session=mock_session(enter_error=aiohttp.ClientConnectionError("refused"))
        )

        with pytest.raises(UpstreamError) as exc_info:
            await client.get_json("https://en.wikipedia.org/w/api.php")

        assert exc_info.value.service == "wikipedia"

    @pytest.mark.asyncio
    async def test_shared_session_not_closed(self):
        session = mock_session()
        client = HTTPClient("brave", session=session)

        await client.close()

        session.close.assert_not_called()
