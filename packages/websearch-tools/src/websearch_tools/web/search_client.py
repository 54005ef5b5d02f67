from __future__ import annotations

import asyncio
from typing import Any

import httpx

from websearch_core.config import SearchAPIConfig
from websearch_core.errors import MissingCredentialError
from websearch_core.logging import get_logger
from websearch_tools.web.http import describe_error

logger = get_logger("web.search_client")

SEARCH_TIMEOUT_SECONDS = 15.0


class SearchAPIClient:
    """Client for the upstream search API.

    Transport and status failures are retried ``retries`` more times with
    a linear delay of ``retry_delay * attempt`` seconds. A retried request
    may count twice against the upstream quota.
    """

    def __init__(
        self,
        config: SearchAPIConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        retries: int = 2,
        retry_delay: float = 1.0,
    ) -> None:
        self._config = config
        self._transport = transport
        self._retries = retries
        self._retry_delay = retry_delay

    async def search(
        self,
        query: str,
        *,
        page: int = 1,
        time_period: str | None = None,
        site: str | None = None,
    ) -> dict[str, Any]:
        """Plain Google search. ``site`` is folded into the query text."""
        params: dict[str, Any] = {
            "engine": "google",
            "q": f"site:{site} {query}" if site else query,
            "page": page,
            "hl": self._config.language,
        }
        if time_period:
            params["time_period"] = time_period
        return await self.get(params)

    async def ai_search(
        self,
        query: str,
        *,
        image_url: str | None = None,
        location: str | None = None,
    ) -> dict[str, Any]:
        """Google AI Mode search."""
        params: dict[str, Any] = {"engine": "google_ai_mode", "q": query}
        if image_url:
            params["url"] = image_url
        if location:
            params["location"] = location
        return await self.get(params)

    async def get(self, params: dict[str, Any]) -> dict[str, Any]:
        """GET the search endpoint and return the decoded JSON body."""
        if not self._config.api_key:
            raise MissingCredentialError(self._config.api_key_env)

        params = {**params, "api_key": self._config.api_key}
        last_error: Exception | None = None
        for attempt in range(self._retries + 1):
            try:
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(SEARCH_TIMEOUT_SECONDS),
                    transport=self._transport,
                ) as client:
                    response = await client.get(
                        self._config.base_url, params=params
                    )
                response.raise_for_status()
                return _decode(response)
            except httpx.HTTPError as e:
                last_error = e
                logger.warning(
                    "Search request failed (attempt %d/%d, engine=%s): %s",
                    attempt + 1, self._retries + 1, params.get("engine"),
                    describe_error(e),
                )
                if attempt < self._retries:
                    await asyncio.sleep(self._retry_delay * (attempt + 1))

        assert last_error is not None
        raise last_error


def _decode(response: httpx.Response) -> dict[str, Any]:
    """JSON body of a successful response; a non-JSON body reads as empty."""
    try:
        data = response.json()
    except ValueError:
        logger.warning(
            "Search API returned a non-JSON body (%s)",
            response.headers.get("content-type", "unknown type"),
        )
        return {}
    return data if isinstance(data, dict) else {}
