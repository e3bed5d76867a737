"""Provider inspection commands for the air CLI."""

import asyncio

import typer

from ai_router.cli.presenters.providers import ProviderPresenter
from ai_router.engine import RoutingEngine, build_engine


def providers() -> None:
    """List the provider catalog and which credentials are set."""
    engine = build_engine()
    ProviderPresenter().present_catalog(
        engine.provider_catalog()["providers"], engine.load_results()
    )


def health() -> None:
    """Probe every configured provider's models endpoint."""
    engine = build_engine()
    results = asyncio.run(_probe(engine))
    ProviderPresenter().present_health(results)
    if results and not any(results.values()):
        raise typer.Exit(code=1)


async def _probe(engine: RoutingEngine) -> dict[str, bool]:
    try:
        return await engine.check_health()
    finally:
        await engine.aclose()
