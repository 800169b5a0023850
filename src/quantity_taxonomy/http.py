from __future__ import annotations

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

# Only the read timeout varies per query source.
CONNECT_TIMEOUT = 10.0
WRITE_TIMEOUT = 20.0
POOL_TIMEOUT = 10.0


def query_timeout(read: float = 60.0) -> httpx.Timeout:
    return httpx.Timeout(connect=CONNECT_TIMEOUT, read=read, write=WRITE_TIMEOUT, pool=POOL_TIMEOUT)


def query_limits() -> httpx.Limits:
    # A build runs two queries at a time.
    return httpx.Limits(max_connections=4, max_keepalive_connections=2)


class HttpClientFactory:
    """Builds the async client a query source holds for its lifetime."""

    @staticmethod
    def client(
        base_url: str | None = None,
        headers: dict | None = None,
        read_timeout: float = 60.0,
    ) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url or "",
            headers=headers,
            timeout=query_timeout(read_timeout),
            limits=query_limits(),
            follow_redirects=True,
        )


TransientHttpError = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


def transient_retrying(attempts: int = 3) -> AsyncRetrying:
    """Retry policy for one query: transport failures only, never HTTP statuses.

    Waits 0.5s, 1s, 2s ... (capped at 10s) plus up to 1s of jitter.
    """
    return AsyncRetrying(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.5, max=10.0) + wait_random(0, 1),
        retry=retry_if_exception_type(TransientHttpError),
    )
