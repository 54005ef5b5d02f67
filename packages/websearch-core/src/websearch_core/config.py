from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from websearch_core.errors import ConfigError

TRANSPORTS = ("stdio", "http")


def _load_toml(path: Path) -> dict:
    """Load a TOML file, returning empty dict if missing."""
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base (1 level deep for TOML sections)."""
    merged = dict(base)
    for key, val in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(val, dict)
        ):
            merged[key] = {**merged[key], **val}
        else:
            merged[key] = val
    return merged


@dataclass(frozen=True, slots=True)
class SearchAPIConfig:
    base_url: str = "https://www.searchapi.io/api/v1/search"
    api_key_env: str = "SEARCHAPI_KEY"
    api_key: str = ""
    language: str = "en"


@dataclass(frozen=True, slots=True)
class ServerConfig:
    name: str = "mcp-websearch"
    version: str = "2.0.0"
    transport: str = "stdio"  # stdio | http
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.transport not in TRANSPORTS:
            raise ConfigError(
                f"Invalid transport: {self.transport!r}."
                f" Expected one of {', '.join(TRANSPORTS)}."
            )
        if not isinstance(self.port, int) or isinstance(self.port, bool):
            raise ConfigError(f"Invalid port: {self.port!r}")


@dataclass(frozen=True, slots=True)
class WebSearchConfig:
    """Top-level configuration, parsed from websearch.toml and the environment."""
    search: SearchAPIConfig = field(default_factory=SearchAPIConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @property
    def has_credential(self) -> bool:
        return bool(self.search.api_key)

    @classmethod
    def from_toml(
        cls, path: Path | str = "websearch.toml"
    ) -> WebSearchConfig:
        path = Path(path)
        raw = _load_toml(path)
        return cls._from_raw(raw)

    @classmethod
    def load(
        cls,
        project_dir: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> WebSearchConfig:
        """Load config with global → project → environment layering.

        Resolution order (later wins):
        1. Built-in defaults
        2. ~/.websearch/config.toml (global)
        3. .websearch/config.toml or websearch.toml (project)
        4. Environment: the API key variable, MCP_TRANSPORT, PORT, LOG_LEVEL
        """
        global_path = Path.home() / ".websearch" / "config.toml"

        project_dir = (
            Path.cwd() if project_dir is None else Path(project_dir)
        )

        # Project config: .websearch/config.toml takes priority
        project_path = project_dir / ".websearch" / "config.toml"
        if not project_path.exists():
            project_path = project_dir / "websearch.toml"

        global_raw = _load_toml(global_path)
        project_raw = _load_toml(project_path)
        merged = _deep_merge(global_raw, project_raw)

        config = cls._from_raw(merged)
        return config.with_env(os.environ if env is None else env)

    def with_env(self, env: Mapping[str, str]) -> WebSearchConfig:
        """Return a copy with environment overrides applied."""
        search = self.search
        api_key = env.get(search.api_key_env, "")
        if api_key:
            search = replace(search, api_key=api_key)

        server_overrides: dict = {}
        if env.get("MCP_TRANSPORT"):
            server_overrides["transport"] = env["MCP_TRANSPORT"].lower()
        if env.get("PORT"):
            try:
                server_overrides["port"] = int(env["PORT"])
            except ValueError as err:
                raise ConfigError(
                    f"Invalid PORT: {env['PORT']!r}"
                ) from err
        if env.get("LOG_LEVEL"):
            server_overrides["log_level"] = env["LOG_LEVEL"].upper()

        server = replace(self.server, **server_overrides)
        return WebSearchConfig(search=search, server=server)

    @classmethod
    def _from_raw(cls, raw: dict) -> WebSearchConfig:
        """Build WebSearchConfig from a raw TOML dict."""
        search_raw = raw.get("search", {})
        server_raw = raw.get("server", {})

        def _pick(section: dict, dc: type) -> dict:
            fields = dc.__dataclass_fields__
            return {
                k: v for k, v in section.items() if k in fields
            }

        return cls(
            search=SearchAPIConfig(
                **_pick(search_raw, SearchAPIConfig)
            ),
            server=ServerConfig(**_pick(server_raw, ServerConfig)),
        )
