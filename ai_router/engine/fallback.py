"""Bounded retry across an ordered chain of providers."""

import logging
import time
from collections.abc import Iterable

from ai_router.core.exceptions import (
    AggregateFailure,
    ConfigurationError,
    ProviderError,
    QuotaExceededError,
)
from ai_router.core.models import FallbackAttempt, RequestSpec, RoutedResult
from ai_router.core.provider import AvailabilityFilter
from ai_router.core.provider_config import ProviderDescriptor
from ai_router.engine.executor import RequestExecutor

logger = logging.getLogger(__name__)


class FallbackController:
    """Walks primary-then-chain until one provider succeeds.

    Providers are tried in order, each at most once, with no backoff.
    A provider found unusable or over quota right before its turn is
    skipped without counting as an attempt. At most ``1 + max_fallbacks``
    calls are made.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        availability: AvailabilityFilter,
        max_fallbacks: int = 2,
    ) -> None:
        self._executor = executor
        self._availability = availability
        self._max_calls = 1 + max(0, max_fallbacks)

    @staticmethod
    def _candidates(
        primary: ProviderDescriptor, chain: Iterable[ProviderDescriptor]
    ) -> list[ProviderDescriptor]:
        seen: set[str] = set()
        ordered = []
        for provider in (primary, *chain):
            if provider.id not in seen:
                seen.add(provider.id)
                ordered.append(provider)
        return ordered

    async def execute_with_fallback(
        self,
        spec: RequestSpec,
        primary: ProviderDescriptor,
        chain: Iterable[ProviderDescriptor] = (),
    ) -> RoutedResult:
        """Execute the request, falling back on provider failure.

        Returns:
            The first successful result plus the failed attempts before it.

        Raises:
            AggregateFailure: Every attempted provider failed.
            ConfigurationError: No candidate could be attempted at all.
        """
        attempts: list[FallbackAttempt] = []
        last_error: ProviderError | None = None
        calls = 0

        for provider in self._candidates(primary, chain):
            if calls >= self._max_calls:
                break
            if not self._availability.is_usable(provider.id):
                logger.debug(f"Skipping provider '{provider.id}': not usable")
                continue

            start = time.perf_counter()
            try:
                result = await self._executor.execute(provider, spec)
            except QuotaExceededError as e:
                logger.debug(f"Skipping provider '{provider.id}': {e.message}")
                continue
            except ProviderError as e:
                calls += 1
                latency_ms = int((time.perf_counter() - start) * 1000)
                attempts.append(
                    FallbackAttempt(
                        provider_id=provider.id,
                        error=e.message,
                        latency_ms=latency_ms,
                        error_type=e.error_type,
                        status_code=e.status_code,
                    )
                )
                last_error = e
                logger.warning(f"Provider '{provider.id}' failed ({e.error_type.value}): {e.message}")
                continue

            if attempts:
                logger.info(
                    f"Fallback to '{provider.id}' succeeded after "
                    f"{len(attempts)} failed attempt(s): {[a.provider_id for a in attempts]}"
                )
            return RoutedResult(result=result, attempts=tuple(attempts))

        if not attempts:
            raise ConfigurationError("No usable AI provider could be attempted for this request")

        logger.error(f"All providers failed: {[a.provider_id for a in attempts]}")
        raise AggregateFailure(attempts, last_error)
