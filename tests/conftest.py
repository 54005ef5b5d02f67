from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from websearch_core.config import SearchAPIConfig, WebSearchConfig
from websearch_tools.web.http import PageFetcher
from websearch_tools.web.search_client import SearchAPIClient

SEARCH_URL = "https://search.example/api/v1/search"


class Router:
    """httpx.MockTransport handler mapping ``scheme://host/path`` to canned replies.

    A route value may be an exception (raised), a dict (JSON 200), a
    ``(status, html)`` tuple, or a callable taking the request.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, html="<html><body>missing</body></html>")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, dict):
            return httpx.Response(200, json=route)
        if isinstance(route, tuple):
            status, body = route
            return httpx.Response(status, html=body)
        return route(request)

    def count(self, key: str) -> int:
        return sum(
            1 for r in self.requests
            if f"{r.url.scheme}://{r.url.host}{r.url.path}" == key
        )


@pytest.fixture
def router() -> Router:
    return Router()


@pytest.fixture
def transport(router: Router) -> httpx.MockTransport:
    return httpx.MockTransport(router)


@pytest.fixture
def config() -> WebSearchConfig:
    return WebSearchConfig(
        search=SearchAPIConfig(base_url=SEARCH_URL, api_key="test-key"),
    )


@pytest.fixture
def search_client(config: WebSearchConfig, transport) -> SearchAPIClient:
    return SearchAPIClient(config.search, transport=transport, retry_delay=0)


@pytest.fixture
def fetcher(transport) -> PageFetcher:
    return PageFetcher(transport=transport)


@pytest.fixture
def page() -> Callable[..., str]:
    """Build a full HTML document."""

    def _page(body: str, head: str = "<title>Test Page</title>") -> str:
        return (
            "<!DOCTYPE html><html><head>"
            f"{head}"
            "</head><body>"
            f"{body}"
            "</body></html>"
        )

    return _page


_LONG_PARAGRAPH = (
    "Python is a high-level, general-purpose programming language. "
    "Its design philosophy emphasizes code readability with the use of "
    "significant indentation. Python is dynamically typed and "
    "garbage-collected. It supports multiple programming paradigms, "
    "including structured, object-oriented and functional programming. "
    "It is often described as a batteries included language."
)


@pytest.fixture
def article_html(page) -> str:
    return page(
        "<header><a href='/home'>Site header</a></header>"
        "<nav><a href='/nav-link'>Navigation</a></nav>"
        "<div class='sidebar'>Sidebar junk</div>"
        "<script>var tracking = 1;</script>"
        "<article>"
        "<h1>About Python</h1>"
        f"<p>{_LONG_PARAGRAPH}</p>"
        "<p>See the <a href='/docs/tutorial'>tutorial</a> and "
        "<a href='https://docs.python.org/3/'>reference</a>.</p>"
        "</article>"
        "<div class='comments'>Great post!</div>"
        "<footer>Copyright</footer>",
        head=(
            "<title>Python Overview</title>"
            '<meta name="description" content="An overview of Python">'
            '<meta name="author" content="Jane Doe">'
            '<meta property="article:published_time" content="2024-05-01T10:00:00Z">'
        ),
    )


@pytest.fixture
def long_text() -> str:
    """A paragraph comfortably over the 300-character content threshold."""
    return _LONG_PARAGRAPH
