"""Config command for the air CLI."""

import os

import typer
from rich.console import Console
from rich.table import Table

from ai_router.core.config import ConfigSchema, InvalidSettingsError, RouterConfig, RouterSettings


def load_settings_or_exit(console: Console) -> RouterConfig:
    """Load settings, printing every invalid variable and exiting with 1 on failure."""
    try:
        return RouterSettings.load()
    except InvalidSettingsError as e:
        console.print(f"[bold red]{len(e.errors)} invalid setting(s)[/bold red]")
        for error in e.errors:
            console.print(
                f"  [red]✗[/red] [cyan]{error.env_var}[/cyan]={error.value!r}: {error.message}"
            )
        raise typer.Exit(code=1) from e


def config(
    docs: bool = typer.Option(
        False, "--docs", help="Print Markdown documentation for every variable"
    ),
) -> None:
    """Show effective settings, or document them with --docs."""
    console = Console()
    if docs:
        console.print(ConfigSchema.generate_markdown_docs(), markup=False, highlight=False)
        return

    settings = load_settings_or_exit(console)

    table = Table(title="AI Router Settings")
    table.add_column("Variable", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source")
    for name in ConfigSchema.all_specs():
        raw = os.environ.get(name, "")
        source = "env" if raw.strip() else "default"
        table.add_row(name, str(getattr(settings, name.lower())), source)
    console.print(table)
