"""Start command for the air CLI."""

import dataclasses

import typer
from rich.console import Console
from rich.table import Table


def start(
    host: str = typer.Option(None, "--host", help="Override host"),
    port: int = typer.Option(None, "--port", help="Override port"),
) -> None:
    """Start the router HTTP server."""
    from ai_router.cli.commands.config import load_settings_or_exit
    from ai_router.main import main as run_server

    console = Console()
    settings = load_settings_or_exit(console)
    overrides = {k: v for k, v in (("host", host), ("port", port)) if v is not None}
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    table = Table(title="AI Router Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Host", settings.host)
    table.add_row("Port", str(settings.port))
    table.add_row("Request Timeout", f"{settings.request_timeout:g}s")
    table.add_row("Max Fallbacks", str(settings.max_fallback_attempts))
    table.add_row("Speed Provider", settings.speed_preferred_provider)
    table.add_row("Minute Limit", "enforced" if settings.enforce_minute_limit else "off")
    console.print(table)

    run_server(settings)
