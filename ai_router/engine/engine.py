"""Routing engine facade.

RoutingEngine wires the provider components together and is the only
object the HTTP and CLI layers talk to. Build one with ``build_engine()``
and close it with ``aclose()`` on shutdown.
"""

import asyncio
import logging
import math
import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

import httpx

from ai_router.conversion import get_wire_format
from ai_router.core.capabilities import Capability
from ai_router.core.config import RouterConfig, RouterSettings
from ai_router.core.exceptions import ConfigurationError, RouterError
from ai_router.core.logging import ConversationLogger
from ai_router.core.models import CostEstimate, RequestSpec, RoutedResult, UsageSummary
from ai_router.core.provider import (
    ApiKeyRotator,
    AvailabilityFilter,
    ClientFactory,
    ProviderConfigLoader,
    ProviderLoadResult,
    ProviderRegistry,
    QuotaTracker,
    SelectionStrategy,
)
from ai_router.core.provider_config import ProviderDescriptor
from ai_router.engine.executor import RequestExecutor
from ai_router.engine.fallback import FallbackController

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 10

# Rough chars-per-token ratio and expected share of max_tokens actually used
CHARS_PER_TOKEN = 4
OUTPUT_TOKEN_RATIO = 0.8


class RoutingEngine:
    """Selects a provider per request, executes it and falls back on failure."""

    def __init__(
        self,
        settings: RouterConfig,
        registry: ProviderRegistry,
        tracker: QuotaTracker,
        clients: ClientFactory,
        rotator: ApiKeyRotator | None = None,
        loader: ProviderConfigLoader | None = None,
    ) -> None:
        self.settings = settings
        self.registry = registry
        self.tracker = tracker
        self.clients = clients
        self.availability = AvailabilityFilter(registry, tracker)
        self.selector = SelectionStrategy(
            self.availability, speed_preferred=settings.speed_preferred_provider
        )
        self.executor = RequestExecutor(
            registry, tracker, clients, rotator or ApiKeyRotator(), settings
        )
        self.fallback = FallbackController(
            self.executor, self.availability, max_fallbacks=settings.max_fallback_attempts
        )
        self._loader = loader

    async def route(self, spec: RequestSpec) -> RoutedResult:
        """Route one request.

        Raises:
            ConfigurationError: No usable provider, or the requested one is unusable.
            AggregateFailure: Every attempted provider failed.
        """
        request_id = uuid.uuid4().hex
        with ConversationLogger.correlation_context(request_id):
            primary = self._select_primary(spec)
            chain = self.selector.build_fallback_chain(spec.capability)
            logger.debug(
                f"Routing {spec.capability.value} request to '{primary.id}', "
                f"chain={[p.id for p in chain]}"
            )
            return await self.fallback.execute_with_fallback(spec, primary, chain)

    def _select_primary(self, spec: RequestSpec) -> ProviderDescriptor:
        if spec.provider_id:
            provider = self.selector.select_explicit(spec.provider_id)
            if provider is None:
                raise ConfigurationError(
                    f"Requested provider '{spec.provider_id}' is not available "
                    "(unknown, missing credential or out of quota)"
                )
            return provider

        provider = self.selector.select_best(spec.capability, spec.goal, spec.max_cost)
        if provider is None:
            raise ConfigurationError(
                f"No available AI providers for capability '{spec.capability.value}'"
            )
        return provider

    async def route_many(self, specs: Sequence[RequestSpec]) -> list[RoutedResult | RouterError]:
        """Route up to MAX_BATCH_SIZE requests concurrently.

        Each item is either its RoutedResult or the RouterError it raised;
        one failure never affects the others. Every route runs to completion
        before an unexpected exception, if any, is re-raised.

        Raises:
            ValueError: If the batch is empty or too large.
        """
        if not specs:
            raise ValueError("Batch must contain at least one request")
        if len(specs) > MAX_BATCH_SIZE:
            raise ValueError(f"Batch may contain at most {MAX_BATCH_SIZE} requests")

        outcomes = await asyncio.gather(
            *(self.route(spec) for spec in specs), return_exceptions=True
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException) and not isinstance(outcome, RouterError):
                raise outcome
        return list(outcomes)

    def estimate_cost(
        self,
        message: str,
        provider_id: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> CostEstimate:
        """Estimate the cost of sending ``message`` without calling anyone.

        Raises:
            ConfigurationError: The named provider is not credentialed, or no chat provider is.
        """
        if provider_id:
            provider = next(
                (p for p in self.availability.available_providers() if p.id == provider_id), None
            )
        else:
            provider = self.selector.select_best(Capability.CHAT)
        if provider is None:
            raise ConfigurationError("No available providers found")

        limit = max_tokens if max_tokens is not None else self.settings.default_max_tokens
        input_tokens = math.ceil(len(message) / CHARS_PER_TOKEN)
        output_tokens = math.ceil(limit * OUTPUT_TOKEN_RATIO)
        total = input_tokens + output_tokens
        rate = provider.pricing.cost_per_1k_tokens

        return CostEstimate(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=total,
            cost_amount=(total / 1000) * rate,
            currency=provider.pricing.currency,
            cost_per_1k_tokens=rate,
            provider_id=provider.id,
            provider_name=provider.name,
            model=model or provider.default_model,
        )

    def usage_stats(self) -> UsageSummary:
        """Usage for every credentialed provider plus totals."""
        summary = UsageSummary()
        for provider in self.availability.available_providers():
            usage = self.tracker.usage(provider.id)
            entry = usage.to_dict()
            entry.update(
                {
                    "provider": provider.name,
                    "cost": provider.pricing.cost_per_1k_tokens,
                    "currency": provider.pricing.currency,
                }
            )
            summary.providers.append(entry)
            summary.total_requests += usage.requests_today
            summary.total_limit += usage.requests_per_day
            if usage.remaining > 0:
                summary.active_providers += 1
        return summary

    async def check_health(self) -> dict[str, bool]:
        """Probe ``GET {base_url}/models`` on every credentialed provider concurrently."""
        providers = self.availability.available_providers()
        results = await asyncio.gather(*(self._probe(p) for p in providers))
        return {provider.id: healthy for provider, healthy in zip(providers, results)}

    async def _probe(self, provider: ProviderDescriptor) -> bool:
        keys = self.registry.credentials(provider)
        if not keys:
            return False
        headers = get_wire_format(provider.api_format).build_headers(keys[0])
        headers.update(provider.custom_headers)
        url = f"{provider.base_url.rstrip('/')}/models"
        client = self.clients.get_or_create_client(provider)
        try:
            response = await client.get(
                url, headers=headers, timeout=self.settings.health_check_timeout
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"Health probe for '{provider.id}' failed: {e}")
            return False
        return response.is_success

    def provider_catalog(self) -> dict[str, Any]:
        """Public view of every registered provider, without secrets."""
        providers = {}
        credentials = {}
        for provider in self.registry.list_providers():
            providers[provider.id] = {
                "name": provider.name,
                "priority": provider.priority,
                "models": list(provider.models),
                "capabilities": sorted(c.value for c in provider.capabilities),
                "pricing": {
                    "costPer1KTokens": provider.pricing.cost_per_1k_tokens,
                    "currency": provider.pricing.currency,
                },
                "rateLimit": {
                    "requestsPerMinute": provider.rate_limit.requests_per_minute,
                    "requestsPerDay": provider.rate_limit.requests_per_day,
                },
                "apiFormat": provider.api_format,
            }
            credentials[provider.id] = self.registry.has_credential(provider)
        return {"providers": providers, "credentials": credentials}

    def load_results(self) -> list[ProviderLoadResult]:
        """Credential status per provider, with hashed keys."""
        loader = self._loader or ProviderConfigLoader()
        return loader.load_provider_results(self.registry.list_providers())

    async def aclose(self) -> None:
        await self.clients.aclose()


def build_engine(
    settings: RouterConfig | None = None,
    environ: Mapping[str, str] | None = None,
    clock: Callable[[], datetime] = datetime.now,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RoutingEngine:
    """Assemble a RoutingEngine from settings and an environment mapping.

    Args:
        settings: Router settings, loaded from ``environ`` when omitted.
        environ: Mapping for credentials and overrides (defaults to os.environ).
        clock: Source of the current local time for quota windows.
        transport: Optional httpx transport shared by every provider client.

    Raises:
        InvalidSettingsError: If any environment variable fails validation.
        ValueError: If the provider catalog is invalid.
    """
    if settings is None:
        settings = RouterSettings.load(environ)

    loader = ProviderConfigLoader(environ=environ, config_file=settings.providers_config_file)
    descriptors = loader.load_providers()
    registry = ProviderRegistry(descriptors, environ=environ)
    tracker = QuotaTracker(
        registry.list_providers(),
        clock=clock,
        enforce_minute_limit=settings.enforce_minute_limit,
    )

    configured = [p.id for p in registry.list_providers() if registry.has_credential(p)]
    if configured:
        logger.info(f"Configured AI providers: {', '.join(configured)}")
    else:
        logger.warning("No AI provider credentials configured; every request will fail")

    return RoutingEngine(
        settings=settings,
        registry=registry,
        tracker=tracker,
        clients=ClientFactory(transport=transport),
        loader=loader,
    )
