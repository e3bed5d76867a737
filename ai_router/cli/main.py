"""Main CLI entry point for ai-router."""

import logging

import typer
from rich.console import Console

from ai_router.cli.commands import config, providers, start

app = typer.Typer(
    name="air",
    help="AI Router CLI - route requests across AI providers",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command()(start.start)
app.command()(providers.providers)
app.command()(providers.health)
app.command()(config.config)


@app.command()
def version() -> None:
    """Show version information."""
    from ai_router import __version__

    console = Console()
    console.print(f"[bold cyan]air[/bold cyan] version [green]{__version__}[/green]")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """AI Router CLI."""
    if verbose:
        from ai_router.core.logging import configure_root_logging

        configure_root_logging("DEBUG")
    else:
        logging.getLogger("ai_router").setLevel(logging.WARNING)


if __name__ == "__main__":
    app()
