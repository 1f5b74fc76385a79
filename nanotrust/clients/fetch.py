"""
nanotrust — HTTP Fetch Client

Plain GET of a publication payload. Failures surface as httpx errors
(transport errors, timeouts, non-2xx statuses); the retriever treats them
all as a discardable candidate failure.
"""

from __future__ import annotations

from types import TracebackType

import httpx

DEFAULT_ACCEPT = "application/trig"
DEFAULT_TIMEOUT_S = 10.0


class HttpFetcher:
    """
    Synchronous fetcher. Owns its ``httpx.Client`` unless one is passed in
    (caller then manages lifecycle).
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        accept: str = DEFAULT_ACCEPT,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout_s, follow_redirects=True)
        self._accept = accept

    def fetch(self, url: str) -> bytes:
        response = self._client.get(url, headers={"Accept": self._accept})
        response.raise_for_status()
        return response.content

    __call__ = fetch

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncHttpFetcher:
    """Asynchronous twin of HttpFetcher, for the parallel retrieval path."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        accept: str = DEFAULT_ACCEPT,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s, follow_redirects=True)
        self._accept = accept

    async def fetch(self, url: str) -> bytes:
        response = await self._client.get(url, headers={"Accept": self._accept})
        response.raise_for_status()
        return response.content

    __call__ = fetch

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncHttpFetcher:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
