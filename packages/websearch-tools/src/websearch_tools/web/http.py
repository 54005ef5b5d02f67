from __future__ import annotations

import socket

import httpx

from websearch_core.errors import ExtractionError
from websearch_core.logging import get_logger

logger = get_logger("web.http")

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64)"
        " AppleWebKit/537.36 Chrome/120.0.0.0"
    ),
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "en-US,en;q=0.9",
}

SCRAPE_TIMEOUT_SECONDS = 20.0
LINKS_TIMEOUT_SECONDS = 15.0
MULTI_TIMEOUT_SECONDS = 15.0
MAX_REDIRECTS = 5

# Substrings resolvers put in the message when a hostname does not resolve.
_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "no address associated with hostname",
    "temporary failure in name resolution",
)

_STATUS_LABELS = {
    403: "Forbidden (403)",
    404: "Not found (404)",
    429: "Rate limited",
}


def _is_dns_failure(exc: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        message = str(current).lower()
        if any(marker in message for marker in _DNS_FAILURE_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False


def _is_textual(content_type: str) -> bool:
    content_type = content_type.lower()
    return content_type.startswith("text/") or any(
        kind in content_type for kind in ("html", "xml", "json")
    )


def describe_error(exc: BaseException) -> str:
    """Map a fetch or search failure to a short human-readable label."""
    if isinstance(exc, httpx.ConnectError) and _is_dns_failure(exc):
        return "Domain not found"
    if isinstance(exc, httpx.TimeoutException):
        return "Timed out"
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        # The stock message embeds the request URL, which can carry the API key.
        return _STATUS_LABELS.get(
            status, f"Request failed with status code {status}"
        )
    return str(exc) or type(exc).__name__


class PageFetcher:
    """GETs arbitrary pages with a browser-like header set.

    Every call is a single attempt: responses with status >= 400 raise
    ``httpx.HTTPStatusError`` so no extraction runs on error pages.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._transport = transport

    async def fetch(
        self,
        url: str,
        *,
        timeout: float,
        max_redirects: int = MAX_REDIRECTS,
    ) -> str:
        async with httpx.AsyncClient(
            follow_redirects=True,
            max_redirects=max_redirects,
            timeout=httpx.Timeout(timeout),
            headers=BROWSER_HEADERS,
            transport=self._transport,
        ) as client:
            response = await client.get(url)

        response.raise_for_status()

        content_type = response.headers.get("content-type", "")
        if content_type and not _is_textual(content_type):
            raise ExtractionError(f"Unsupported content type: {content_type}")

        logger.debug(
            "Fetched %s (%d, %d bytes)",
            url, response.status_code, len(response.content),
        )
        return response.text
