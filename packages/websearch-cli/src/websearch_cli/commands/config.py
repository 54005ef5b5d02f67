from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from websearch_core.config import WebSearchConfig
from websearch_core.errors import ConfigError

console = Console()

config_app = typer.Typer(
    name="config",
    help="View websearch configuration",
    invoke_without_command=True,
)


def _mask(secret: str) -> str:
    if not secret:
        return "[red](not set)[/red]"
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:4]}…{secret[-4:]}"


@config_app.callback(invoke_without_command=True)
def config_command(
    ctx: typer.Context,
    show_files: bool = typer.Option(
        False,
        "--files",
        "-f",
        help="Print the TOML files that feed the config",
    ),
) -> None:
    """View the resolved configuration (defaults, files, environment)."""
    if ctx.invoked_subcommand is not None:
        return

    if show_files:
        _print_files()
        return

    try:
        config = WebSearchConfig.load()
    except ConfigError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(title="websearch configuration", show_header=False)
    table.add_column("key", style="bold")
    table.add_column("value")
    table.add_row("search.base_url", config.search.base_url)
    table.add_row(
        f"search.api_key ({config.search.api_key_env})",
        _mask(config.search.api_key),
    )
    table.add_row("search.language", config.search.language)
    table.add_row("server.name", config.server.name)
    table.add_row("server.transport", config.server.transport)
    table.add_row("server.host", config.server.host)
    table.add_row("server.port", str(config.server.port))
    table.add_row("server.log_level", config.server.log_level)
    console.print(table)


def _print_files() -> None:
    global_path = Path.home() / ".websearch" / "config.toml"
    project_path = Path.cwd() / ".websearch" / "config.toml"
    if not project_path.exists():
        project_path = Path.cwd() / "websearch.toml"

    found = False
    for label, path in (
        ("Global (~/.websearch/config.toml)", global_path),
        (f"Project ({project_path.name})", project_path),
    ):
        if not path.exists():
            continue
        found = True
        console.print(f"[bold]{label}[/bold]:")
        console.print(Syntax(path.read_text(), "toml", theme="monokai"))
        console.print()

    if not found:
        console.print(
            "[yellow]No config files found;"
            " using defaults and environment.[/yellow]"
        )
