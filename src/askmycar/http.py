"""Async HTTP client for third-party lookups.

Thin wrapper around an aiohttp session used by the manual lookup, web
search, NHTSA and Wikipedia integrations. It knows HOW to fetch JSON with
a bounded timeout and typed errors, not WHAT to fetch.

Usage:
    async with HTTPClient("brave", timeout_seconds=4.0) as client:
        data = await client.get_json(url, params={"q": "recalls"})

A session can be shared between clients by passing it in; the client only
closes sessions it created itself.
"""
import asyncio
import logging
from typing import Any, Optional

import aiohttp

from .exceptions import UpstreamError, UpstreamTimeoutError

logger = logging.getLogger(__name__)


class HTTPClient:
    """JSON-over-HTTP client bound to one upstream service.

    Attributes:
        service: Short service name used in logs and errors
        timeout_seconds: Total timeout for every request
    """

    def __init__(
        self,
        service: str,
        timeout_seconds: float = 4.0,
        session: Optional[aiohttp.ClientSession] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self.service = service
        self.timeout_seconds = timeout_seconds
        self.headers = dict(headers or {})
        self._session = session
        self._owns_session = session is None

    # ----------------------------------------
    # Context Manager Protocol
    # ----------------------------------------

    async def __aenter__(self) -> "HTTPClient":
        self._get_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(limit=10, limit_per_host=5),
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    # ----------------------------------------
    # Requests
    # ----------------------------------------

    async def get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """GET a URL and decode the JSON body.

        Args:
            url: Absolute URL
            params: Query parameters
            headers: Extra request headers (merged over the client defaults)

        Returns:
            Decoded JSON body

        Raises:
            UpstreamError: Non-2xx status or connection failure
            UpstreamTimeoutError: Request exceeded timeout_seconds
        """
        session = self._get_session()
        request_headers = {**self.headers, **(headers or {})}

        try:
            async with session.get(
                url,
                params=params,
                headers=request_headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                if not 200 <= response.status < 300:
                    raise UpstreamError(
                        f"{self.service} returned HTTP {response.status}",
                        service=self.service,
                        status_code=response.status,
                    )
                return await response.json(content_type=None)

        except asyncio.TimeoutError as e:
            raise UpstreamTimeoutError(
                self.service, self.timeout_seconds, cause=e
            ) from e
        except aiohttp.ClientError as e:
            raise UpstreamError(
                f"{self.service} request failed: {e}",
                service=self.service,
                cause=e,
            ) from e
        except ValueError as e:
            raise UpstreamError(
                f"{self.service} returned invalid JSON",
                service=self.service,
                cause=e,
            ) from e
