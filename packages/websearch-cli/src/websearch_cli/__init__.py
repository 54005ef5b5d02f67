"""Websearch CLI: run and inspect the MCP server."""
