from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from websearch_core.config import WebSearchConfig
from websearch_core.errors import MissingCredentialError
from websearch_core.logging import get_logger
from websearch_tools.web.formatting import format_ai_answer, format_search
from websearch_tools.web.http import describe_error
from websearch_tools.web.params import HttpURL, TimePeriod
from websearch_tools.web.search_client import SearchAPIClient

logger = get_logger("web.search")


def create_search_server(
    config: WebSearchConfig,
    client: SearchAPIClient | None = None,
) -> FastMCP:
    """Build the server exposing ``web_search`` and ``ai_search``."""
    search_server = FastMCP("websearch-search")
    client = client or SearchAPIClient(config.search)

    @search_server.tool()
    async def web_search(
        query: Annotated[
            str,
            Field(description="The search query - be specific for better results"),
        ],
        num_results: Annotated[
            int,
            Field(ge=1, le=20, description="Number of results to return (1-20, default 10)"),
        ] = 10,
        page: Annotated[
            int,
            Field(
                ge=1, le=10,
                description=(
                    "Page number for pagination (1-10, default 1)."
                    " Use if first page doesn't have what you need."
                ),
            ),
        ] = 1,
        time_period: Annotated[
            TimePeriod | None,
            Field(description="Filter results by time period"),
        ] = None,
        site: Annotated[
            str | None,
            Field(description="Limit search to specific site (e.g., 'github.com', 'stackoverflow.com')"),
        ] = None,
    ) -> str:
        """Search the web using Google Search via SearchAPI.io.

        Use this to find information, news or current events, to research
        a topic, or when facts may have changed recently.

        Returns a list of results with titles, URLs, and snippets. Follow
        up with web_scrape to read the full content of a relevant URL.
        """
        try:
            data = await client.search(
                query, page=page, time_period=time_period, site=site
            )
        except MissingCredentialError as e:
            raise ToolError(f"Error: {e}") from e
        except Exception as e:
            logger.warning("web_search failed for %r: %s", query, describe_error(e))
            raise ToolError(f"Search failed: {describe_error(e)}") from e

        return format_search(
            query,
            data,
            num_results=num_results,
            page=page,
            time_period=time_period,
            site=site,
        )

    @search_server.tool()
    async def ai_search(
        query: Annotated[
            str,
            Field(description="The question or topic to get an AI-generated answer for"),
        ],
        image_url: Annotated[
            HttpURL | None,
            Field(description="Optional image URL for visual questions (e.g., 'What is in this image?')"),
        ] = None,
        location: Annotated[
            str | None,
            Field(description="Location for local queries (e.g., 'New York' for 'restaurants near me')"),
        ] = None,
    ) -> str:
        """Search using Google AI Mode and get an AI-generated answer with sources.

        Use this for questions that need a synthesized explanation rather
        than links, or when regular search results are not good enough.

        Returns a markdown answer followed by reference links and, for local
        queries, nearby places. More expensive than web_search.
        """
        try:
            data = await client.ai_search(
                query, image_url=image_url, location=location
            )
        except MissingCredentialError as e:
            raise ToolError(f"Error: {e}") from e
        except Exception as e:
            logger.warning("ai_search failed for %r: %s", query, describe_error(e))
            raise ToolError(f"AI search failed: {describe_error(e)}") from e

        return format_ai_answer(query, data)

    return search_server
