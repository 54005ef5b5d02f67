"""Websearch Core: shared types, config, errors, and logging."""
from __future__ import annotations

from websearch_core._version import __version__
from websearch_core.config import (
    SearchAPIConfig,
    ServerConfig,
    WebSearchConfig,
)
from websearch_core.errors import (
    ConfigError,
    ExtractionError,
    MissingCredentialError,
    WebSearchError,
)
from websearch_core.logging import get_logger, setup_logging
from websearch_core.types import (
    LinkRecord,
    PageOutcome,
    PageSummary,
    ScrapedPage,
    SearchResultItem,
)

__all__ = [
    # Errors
    "ConfigError",
    "ExtractionError",
    # Types
    "LinkRecord",
    "MissingCredentialError",
    "PageOutcome",
    "PageSummary",
    "ScrapedPage",
    # Config
    "SearchAPIConfig",
    "SearchResultItem",
    "ServerConfig",
    "WebSearchConfig",
    "WebSearchError",
    # Version
    "__version__",
    # Logging
    "get_logger",
    "setup_logging",
]
