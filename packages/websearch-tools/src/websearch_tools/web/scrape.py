from __future__ import annotations

import asyncio
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from websearch_core.logging import get_logger
from websearch_core.types import PageOutcome, PageSummary
from websearch_tools.web.extract import extract_page, render_page, summarize_page
from websearch_tools.web.formatting import RULE
from websearch_tools.web.http import (
    LINKS_TIMEOUT_SECONDS,
    MULTI_TIMEOUT_SECONDS,
    SCRAPE_TIMEOUT_SECONDS,
    PageFetcher,
    describe_error,
)
from websearch_tools.web.links import extract_links, format_links
from websearch_tools.web.params import ExtractMode, HttpURL

logger = get_logger("web.scrape")

MAX_URLS = 5


async def scrape_pages(
    fetcher: PageFetcher, urls: list[str], max_per_page: int
) -> list[PageOutcome]:
    """Fetch and summarize every URL concurrently.

    Waits for all fetches to settle; a failed URL yields an outcome with
    an error instead of affecting the others. Order follows ``urls``.
    """
    async def _one(url: str) -> PageSummary:
        html = await fetcher.fetch(url, timeout=MULTI_TIMEOUT_SECONDS)
        return summarize_page(html, url, max_per_page)

    settled = await asyncio.gather(
        *(_one(url) for url in urls), return_exceptions=True
    )

    outcomes: list[PageOutcome] = []
    for url, result in zip(urls, settled):
        if isinstance(result, BaseException):
            logger.warning("scrape_multiple: %s failed: %s", url, describe_error(result))
            outcomes.append(PageOutcome(url=url, error=describe_error(result)))
        else:
            outcomes.append(PageOutcome(url=url, page=result))
    return outcomes


def format_outcomes(outcomes: list[PageOutcome]) -> str:
    out = f"Multi-page scrape\n{RULE}\n\n"
    for i, outcome in enumerate(outcomes, 1):
        if outcome.ok:
            page = outcome.page
            out += f"[{i}] {page.title}\n{page.url}\n{'─' * 40}\n{page.body}\n\n"
        else:
            out += f"[{i}] FAILED: {outcome.url}\n{outcome.error}\n\n"
    return out


def create_scrape_server(
    fetcher: PageFetcher | None = None,
) -> FastMCP:
    """Build the server exposing ``web_scrape``, ``get_links`` and ``scrape_multiple``."""
    scrape_server = FastMCP("websearch-scrape")
    fetcher = fetcher or PageFetcher()

    @scrape_server.tool()
    async def web_scrape(
        url: HttpURL,
        selector: Annotated[
            str | None,
            Field(description=(
                "Optional CSS selector to extract specific elements"
                " (e.g., 'article', '.main-content', '#post-body')"
            )),
        ] = None,
        extract_mode: Annotated[
            ExtractMode,
            Field(description=(
                "Output format: 'text' (plain), 'markdown' (preserve formatting),"
                " 'structured' (headings + paragraphs)"
            )),
        ] = "text",
        include_links: Annotated[
            bool, Field(description="Include links found in the content")
        ] = False,
        max_length: Annotated[
            int,
            Field(ge=1000, le=50000, description="Maximum content length (1000-50000, default 10000)"),
        ] = 10000,
    ) -> str:
        """Scrape and extract readable content from a webpage URL.

        Use this to read a page the user shared, or to get the details
        behind a web_search result.

        Returns the page title, meta description, and main text content.
        Scripts, styles, and navigation are removed and the content is
        truncated to max_length.
        """
        try:
            html = await fetcher.fetch(url, timeout=SCRAPE_TIMEOUT_SECONDS)
            page = extract_page(
                html,
                url,
                selector=selector,
                mode=extract_mode,
                include_links=include_links,
                max_length=max_length,
            )
        except Exception as e:
            logger.warning("web_scrape failed for %s: %s", url, describe_error(e))
            raise ToolError(f"Scrape failed ({url}): {describe_error(e)}") from e

        return render_page(page)

    @scrape_server.tool()
    async def get_links(
        url: HttpURL,
        filter: Annotated[
            str | None,
            Field(description="Optional text filter - only return links containing this text in URL or anchor"),
        ] = None,
    ) -> str:
        """Extract all links from a webpage.

        Use this to explore a site's structure or find related pages and
        resources linked from a URL.

        Returns links with their anchor text and URLs (max 50 shown).
        """
        try:
            html = await fetcher.fetch(url, timeout=LINKS_TIMEOUT_SECONDS)
            links = extract_links(html, url, filter)
        except Exception as e:
            logger.warning("get_links failed for %s: %s", url, describe_error(e))
            raise ToolError(f"Failed: {describe_error(e)}") from e

        return format_links(url, links, filter)

    @scrape_server.tool()
    async def scrape_multiple(
        urls: Annotated[
            list[HttpURL],
            Field(min_length=1, max_length=MAX_URLS, description="URLs to scrape (max 5)"),
        ],
        max_per_page: Annotated[
            int,
            Field(ge=500, le=5000, description="Max content length per page (500-5000, default 2000)"),
        ] = 2000,
    ) -> str:
        """Scrape multiple URLs at once and return combined results.

        Use this to compare pages or gather information from several
        search results. Limited to 5 URLs.

        Returns each page's content in input order; a page that fails is
        reported as FAILED without affecting the others.
        """
        outcomes = await scrape_pages(fetcher, urls, max_per_page)
        return format_outcomes(outcomes)

    return scrape_server
