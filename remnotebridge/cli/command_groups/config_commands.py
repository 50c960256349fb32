"""Config command group."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from remnotebridge.config.loader import get_config_path, load_config, save_config
from remnotebridge.config.schema import Config


def register_config_commands(app: typer.Typer, console: Console) -> None:
    """Register config command group."""
    config_app = typer.Typer(help="Show or initialize configuration")
    app.add_typer(config_app, name="config")

    @config_app.command("show")
    def config_show(
        config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
    ) -> None:
        """Show the effective configuration."""
        path = config_path or get_config_path()
        try:
            config = load_config(path)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

        table = Table(title="remnote-bridge config")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="yellow")
        table.add_row("file", f"{path} {'[green]✓[/green]' if path.exists() else '[dim](defaults)[/dim]'}")
        table.add_row("bridge.url", config.bridge_url)
        table.add_row("batch.continueOnFail", "✓" if config.batch.continue_on_fail else "✗")
        table.add_row("logging.level", config.logging.level)
        table.add_row("logging.fileEnabled", "✓" if config.logging.file_enabled else "✗")
        console.print(table)

    @config_app.command("init")
    def config_init(
        config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
        force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
    ) -> None:
        """Write default configuration."""
        path = config_path or get_config_path()
        if path.exists() and not force:
            console.print(f"[yellow]Config already exists:[/yellow] {path} (use --force to overwrite)")
            raise typer.Exit(1)
        save_config(Config(), path)
        console.print(f"[green]✓[/green] Wrote {path}")
