from __future__ import annotations

import typer
from rich.console import Console

from websearch_cli.commands.config import config_app
from websearch_core.config import WebSearchConfig
from websearch_core.errors import ConfigError
from websearch_core.logging import get_logger, setup_logging

app = typer.Typer(
    name="websearch",
    help="mcp-websearch: web search and page extraction tools over MCP",
)

app.add_typer(
    config_app,
    name="config",
    help="View the resolved configuration",
)

console = Console(stderr=True)
logger = get_logger("cli")


@app.command()
def serve(
    transport: str | None = typer.Option(
        None,
        "--transport",
        "-t",
        help="stdio (default) or http; overrides MCP_TRANSPORT",
    ),
    host: str | None = typer.Option(
        None, "--host", help="Bind address for the http transport"
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Port for the http transport; overrides PORT"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING)"
    ),
    log_json: bool = typer.Option(
        False, "--log-json", help="Emit log records as JSON lines on stderr"
    ),
) -> None:
    """Run the MCP server."""
    from dataclasses import replace

    from websearch_tools.gateway import create_gateway

    try:
        config = WebSearchConfig.load()
        overrides = {
            k: v
            for k, v in {
                "transport": transport.lower() if transport else None,
                "host": host,
                "port": port,
                "log_level": log_level.upper() if log_level else None,
            }.items()
            if v is not None
        }
        config = replace(config, server=replace(config.server, **overrides))
    except ConfigError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(2) from e

    setup_logging(config.server.log_level, json_output=log_json)
    gateway = create_gateway(config)

    if config.server.transport == "http":
        logger.info(
            "[http] mcp server running on http://%s:%d",
            config.server.host, config.server.port,
        )
        gateway.run(
            transport="http",
            host=config.server.host,
            port=config.server.port,
        )
    else:
        logger.info("[stdio] websearch mcp ready")
        gateway.run(transport="stdio")


@app.command()
def version() -> None:
    """Show the websearch version."""
    from websearch_core import __version__

    Console().print(f"mcp-websearch {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
