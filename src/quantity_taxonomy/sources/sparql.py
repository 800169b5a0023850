from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from quantity_taxonomy.errors import FetchError
from quantity_taxonomy.http import HttpClientFactory, transient_retrying
from quantity_taxonomy.settings import settings

logger = logging.getLogger(__name__)


class QuerySource(Protocol):
    """Anything that can run a query and hand back raw binding records."""

    async def execute(self, query: str) -> list[dict[str, Any]]: ...


def parse_envelope(payload: Any, *, query: str | None = None) -> list[dict[str, Any]]:
    """Extract `results.bindings` from a SPARQL JSON result envelope."""
    results = payload.get("results") if isinstance(payload, dict) else None
    bindings = results.get("bindings") if isinstance(results, dict) else None
    if not isinstance(bindings, list):
        raise FetchError("response is not a SPARQL result envelope", query=query)
    return bindings


class SparqlQuerySource:
    """SPARQL endpoint client (Wikidata Query Service by default).

    Docs: https://www.mediawiki.org/wiki/Wikidata_Query_Service/User_Manual

    Transport errors are retried a few times; everything else, including HTTP
    error statuses, fails the query with FetchError.
    """

    def __init__(
        self,
        endpoint_url: str | None = None,
        *,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        max_attempts: int | None = None,
        timeout: float | None = None,
    ):
        self.endpoint_url = endpoint_url or settings.endpoint_url
        self.max_attempts = max_attempts or settings.max_attempts
        hdrs = {"Accept": settings.accept, "User-Agent": settings.user_agent}
        hdrs.update(headers or {})
        self._client = client or HttpClientFactory.client(
            headers=hdrs, read_timeout=timeout or settings.request_timeout
        )
        self._headers = hdrs

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> SparqlQuerySource:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def execute(self, query: str) -> list[dict[str, Any]]:
        logger.debug("SPARQL GET %s (%d chars)", self.endpoint_url, len(query))
        try:
            async for attempt in transient_retrying(self.max_attempts):
                with attempt:
                    r = await self._client.get(
                        self.endpoint_url, params={"query": query}, headers=self._headers
                    )
        except httpx.HTTPError as e:
            logger.warning("SPARQL request to %s failed: %s", self.endpoint_url, e)
            raise FetchError(f"request failed: {e}", query=query) from e

        if r.is_error:
            logger.warning("SPARQL endpoint %s answered %d", self.endpoint_url, r.status_code)
            raise FetchError(f"endpoint answered HTTP {r.status_code}", query=query)
        try:
            payload = r.json()
        except ValueError as e:
            logger.warning("SPARQL endpoint %s returned a non-JSON body", self.endpoint_url)
            raise FetchError("response body is not JSON", query=query) from e

        try:
            bindings = parse_envelope(payload, query=query)
        except FetchError:
            logger.warning("SPARQL endpoint %s returned an unexpected result shape", self.endpoint_url)
            raise
        logger.debug("SPARQL query returned %d bindings", len(bindings))
        return bindings
