from __future__ import annotations


class WebSearchError(Exception):
    """Base exception for all websearch errors."""


# ── Config Errors ────────────────────────────────────────────────────

class ConfigError(WebSearchError):
    """Invalid or missing configuration."""


class MissingCredentialError(ConfigError):
    """The search API key is not configured."""

    def __init__(self, env_var: str) -> None:
        self.env_var = env_var
        super().__init__(f"{env_var} not configured.")


# ── Extraction Errors ────────────────────────────────────────────────

class ExtractionError(WebSearchError):
    """Fetched content could not be processed as HTML."""
