"""Presenters for provider display in CLI."""

from collections.abc import Mapping, Sequence
from typing import Any

from rich.console import Console
from rich.table import Table

from ai_router.core.provider import ProviderLoadResult

PROVIDER_COLORS = {
    "openrouter": "magenta",
    "openai": "blue",
    "anthropic": "green",
    "cohere": "yellow",
    "groq": "red",
    "together": "cyan",
}


class ProviderPresenter:
    """Renders provider catalog and health data with Rich.

    Contains no business logic; callers pass in plain data from the engine.
    """

    def __init__(self, console: Console | None = None):
        """Initialize presenter with optional Rich console.

        Args:
            console: Rich Console instance. If None, creates a new one.
        """
        self.console = console or Console()

    def present_catalog(
        self,
        catalog: Mapping[str, Mapping[str, Any]],
        load_results: Sequence[ProviderLoadResult],
    ) -> None:
        """Show one row per provider with pricing, limits and credential status."""
        status_by_id = {r.name: r for r in load_results}

        table = Table(title="AI Providers")
        table.add_column("Priority", justify="right")
        table.add_column("Provider")
        table.add_column("Default Model")
        table.add_column("$/1K tokens", justify="right")
        table.add_column("Req/day", justify="right")
        table.add_column("Capabilities")
        table.add_column("Credential")

        for provider_id, info in catalog.items():
            color = PROVIDER_COLORS.get(provider_id, "white")
            result = status_by_id.get(provider_id)
            if result is not None and result.status == "success":
                credential = f"[green]✓[/green] {result.api_key_hash}"
            else:
                credential = "[red]✗ missing[/red]"

            table.add_row(
                str(info["priority"]),
                f"[{color}]{provider_id}[/{color}]",
                info["models"][0] if info["models"] else "-",
                f"{info['pricing']['costPer1KTokens']:g} {info['pricing']['currency']}",
                str(info["rateLimit"]["requestsPerDay"]),
                ", ".join(info["capabilities"]),
                credential,
            )

        self.console.print(table)

        configured = sum(1 for r in load_results if r.status == "success")
        self.console.print(f"\n{configured} of {len(catalog)} providers configured")

    def present_health(self, results: Mapping[str, bool]) -> None:
        """Show the outcome of a health probe."""
        if not results:
            self.console.print("[yellow]No providers configured; nothing to check[/yellow]")
            return

        for provider_id, healthy in results.items():
            mark = "[green]✓ healthy[/green]" if healthy else "[red]✗ unreachable[/red]"
            self.console.print(f"  {provider_id:<12} {mark}")

        healthy_count = sum(1 for ok in results.values() if ok)
        self.console.print(f"\n{healthy_count}/{len(results)} providers healthy")
