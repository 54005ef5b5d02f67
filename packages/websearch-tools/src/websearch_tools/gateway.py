from __future__ import annotations

from fastmcp import FastMCP

from websearch_core.config import WebSearchConfig
from websearch_core.logging import get_logger
from websearch_tools.web.http import PageFetcher
from websearch_tools.web.scrape import create_scrape_server
from websearch_tools.web.search import create_search_server
from websearch_tools.web.search_client import SearchAPIClient

logger = get_logger("gateway")


def create_gateway(
    config: WebSearchConfig | None = None,
    *,
    search_client: SearchAPIClient | None = None,
    fetcher: PageFetcher | None = None,
) -> FastMCP:
    """Create the MCP server composing the web tool servers.

    Servers are mounted without a prefix, so the tools keep their bare
    names:
    - web_search, ai_search: upstream search API
    - web_scrape, get_links, scrape_multiple: page fetching and
      extraction
    """
    config = config or WebSearchConfig.load()

    if not config.has_credential:
        logger.warning("%s not set", config.search.api_key_env)

    gateway = FastMCP(
        config.server.name,
        version=config.server.version,
        instructions=(
            "Search the web with web_search or ai_search, then read pages"
            " with web_scrape, get_links, or scrape_multiple."
        ),
    )

    gateway.mount(create_search_server(config, client=search_client))
    gateway.mount(create_scrape_server(fetcher=fetcher))

    return gateway
