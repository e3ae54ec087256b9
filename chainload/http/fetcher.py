"""HTTP fetcher built on httpx.

``HttpFetcher`` owns one ``httpx.AsyncClient`` shared by every chain of a
run. The pool is configured without a connection ceiling so it never caps
the number of chains in flight.

Example:
    >>> async def main():
    ...     async with HttpFetcher(timeout=10.0) as fetcher:
    ...         result = await fetcher.fetch("https://example.com/")
    ...         print(result.elapsed, result.url)
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from chainload import __version__
from chainload.core.outcome import FetchSuccess

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"chainload/{__version__}"


class HttpFetcher:
    """Async GET fetcher that drains every response body.

    Attributes:
        timeout: Per-fetch timeout in seconds (connect, read, write, pool).
        follow_redirects: Whether redirects are followed.
        reject_error_status: Raise ``httpx.HTTPStatusError`` for 4xx/5xx
            responses so they classify as invalid status codes.
        user_agent: Value of the User-Agent header.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        follow_redirects: bool = False,
        reject_error_status: bool = False,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Per-fetch timeout in seconds.
            follow_redirects: Follow 3xx responses.
            reject_error_status: Treat 4xx/5xx responses as failures.
            user_agent: User-Agent header (default: chainload/<version>).
            transport: Custom httpx transport, mainly for tests.
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.reject_error_status = reject_error_status
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying client."""
        kwargs: dict[str, Any] = {
            "timeout": self.timeout,
            "follow_redirects": self.follow_redirects,
            "headers": {"User-Agent": self.user_agent},
            "limits": httpx.Limits(max_connections=None, max_keepalive_connections=None),
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        self._client = httpx.AsyncClient(**kwargs)
        logger.debug(f"HTTP fetcher connected (timeout={self.timeout}s)")

    async def disconnect(self) -> None:
        """Close the underlying client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> FetchSuccess:
        """GET ``url`` and read the whole body.

        The body is decoded according to its Content-Encoding while it is
        drained. The elapsed time runs from just before the request is sent
        until the last body chunk has been read, so it covers the full transfer.

        Args:
            url: Absolute URL to fetch.

        Returns:
            FetchSuccess with the elapsed seconds and the resolved URL.

        Raises:
            httpx.HTTPError: On transport, protocol or timeout failures, and
                on 4xx/5xx responses when ``reject_error_status`` is set.
        """
        if not self._client:
            await self.connect()
        assert self._client is not None

        start_time = time.perf_counter()
        async with self._client.stream("GET", url) as response:
            async for _ in response.aiter_bytes():
                pass
            elapsed = time.perf_counter() - start_time
            if self.reject_error_status:
                response.raise_for_status()
        return FetchSuccess(elapsed=elapsed, url=str(response.url))

    async def __aenter__(self) -> HttpFetcher:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
