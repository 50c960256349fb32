"""CLI commands for remnote-bridge.

Top-level commands (create, batch, version) plus the config command group.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from remnotebridge import __logo__, __version__
from remnotebridge.bridge.correlator import send_create_request
from remnotebridge.cli.command_groups.config_commands import register_config_commands
from remnotebridge.cli.shared.logging_utils import configure_console_logging, ensure_rotating_log_file
from remnotebridge.config.access import get_config
from remnotebridge.config.schema import Config
from remnotebridge.node.remnote_node import RemNoteNode
from remnotebridge.utils.exceptions import RemBridgeError, classify_exception

app = typer.Typer(
    name="remnote-bridge",
    help=f"{__logo__} remnote-bridge - create rems through the local RemNote bridge",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log exchange details to stderr"),
) -> None:
    configure_console_logging(verbose)


def _load_settings(config_path: Path | None) -> Config:
    try:
        config = get_config(config_path)
    except ValueError as e:
        _print_failure(e)
        raise typer.Exit(1)
    if config.logging.file_enabled:
        ensure_rotating_log_file("remnote-bridge", level=config.logging.level)
    return config


def _print_failure(exc: Exception, context: str = "") -> None:
    code, category, retryable = classify_exception(exc)
    message = exc.message if isinstance(exc, RemBridgeError) else str(exc)
    prefix = f"{escape(context)}: " if context else ""
    hint = " [dim](retryable)[/dim]" if retryable else ""
    console.print(f"[red]Error[/red] ({code}, {category.value}): {prefix}{escape(message)}{hint}")


def _load_items(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array or JSON lines file of item objects."""
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return []
    if text.startswith("["):
        rows = json.loads(text)
    else:
        rows = [json.loads(line) for line in text.splitlines() if line.strip()]
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        raise ValueError("items must be JSON objects")
    return rows


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"{__logo__} remnote-bridge v{__version__}")


@app.command()
def create(
    text: str = typer.Argument(..., help="Content of the new rem"),
    parent: str = typer.Option("", "--parent", "-p", help="Parent rem ID"),
    port: int = typer.Option(None, "--port", help="Bridge port (default from config)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Create one rem and print the bridge reply."""
    config = _load_settings(config_path)
    try:
        payload = asyncio.run(
            send_create_request(text, parent, port or config.bridge.port, host=config.bridge.host)
        )
    except RemBridgeError as e:
        _print_failure(e)
        raise typer.Exit(1)
    console.print_json(data=payload)


@app.command()
def batch(
    file: Path = typer.Argument(..., dir_okay=False, help="JSON array or JSON lines of items"),
    port: int = typer.Option(None, "--port", help="Default bridge port for items without one"),
    continue_on_fail: bool = typer.Option(False, "--continue-on-fail", help="Record failed items and keep going"),
    fail_fast: bool = typer.Option(False, "--fail-fast", help="Abort on the first failure (overrides config)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Create one rem per item, in order."""
    config = _load_settings(config_path)
    try:
        items = _load_items(file)
    except (OSError, ValueError) as e:
        _print_failure(e, context=f"items file {file}")
        raise typer.Exit(1)

    default_port = port or config.bridge.port
    tolerant = (config.batch.continue_on_fail or continue_on_fail) and not fail_fast
    node = RemNoteNode(
        [{"port": default_port, **row} for row in items],
        continue_on_fail=tolerant,
        host=config.bridge.host,
        send=send_create_request,
    )
    try:
        output = asyncio.run(node.execute())
    except RemBridgeError as e:
        _print_failure(e)
        raise typer.Exit(1)

    table = Table(title=f"Created rems ({len(items)} items)")
    table.add_column("#", style="cyan")
    table.add_column("Status")
    table.add_column("Result", style="yellow")
    failed = 0
    for index, record in enumerate(output[0]):
        row = record["json"]
        if "error" in row and row.get("success") is not True:
            failed += 1
            table.add_row(str(index), "[red]✗[/red]", str(row["error"]))
        else:
            table.add_row(str(index), "[green]✓[/green]", json.dumps(row, ensure_ascii=False))
    console.print(table)
    if failed:
        raise typer.Exit(2)


register_config_commands(app=app, console=console)


if __name__ == "__main__":
    app()
