"""Websearch Tools: MCP servers for web search and page extraction."""
from __future__ import annotations

from websearch_tools.gateway import create_gateway

__all__ = ["create_gateway"]
