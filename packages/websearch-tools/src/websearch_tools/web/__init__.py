"""Web tools: search API client, page fetcher, and content extraction servers."""
from __future__ import annotations

from websearch_tools.web.scrape import create_scrape_server
from websearch_tools.web.search import create_search_server

__all__ = ["create_scrape_server", "create_search_server"]
