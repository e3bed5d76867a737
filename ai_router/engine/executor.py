"""Outbound provider calls and response normalization."""

import asyncio
import json
import logging
import time

import httpx

from ai_router.conversion import get_wire_format
from ai_router.core.config import RouterConfig
from ai_router.core.error_types import ErrorType
from ai_router.core.exceptions import ProviderError, ProviderTimeoutError
from ai_router.core.models import CanonicalResult, RequestSpec, Usage
from ai_router.core.provider import ApiKeyRotator, ClientFactory, ProviderRegistry, QuotaTracker
from ai_router.core.provider_config import ProviderDescriptor

logger = logging.getLogger(__name__)


class RequestExecutor:
    """Issues one call to one provider and returns a CanonicalResult.

    Quota is reserved right before dispatch and stays spent whether the
    call succeeds or fails. A QuotaExceededError from the reservation
    propagates untouched so the caller can skip the provider.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        tracker: QuotaTracker,
        clients: ClientFactory,
        rotator: ApiKeyRotator,
        settings: RouterConfig,
    ) -> None:
        self._registry = registry
        self._tracker = tracker
        self._clients = clients
        self._rotator = rotator
        self._settings = settings

    def resolve_model(self, provider: ProviderDescriptor, spec: RequestSpec) -> str:
        """Use the requested model when it belongs to this provider, else its default.

        A model named together with an explicit provider is passed through
        as-is, since provider model lists are not exhaustive.
        """
        if spec.model and (spec.model in provider.models or spec.provider_id == provider.id):
            return spec.model
        return provider.default_model

    def effective_timeout(self, spec: RequestSpec) -> float:
        if spec.timeout_seconds is not None:
            return min(self._settings.request_timeout, spec.timeout_seconds)
        return self._settings.request_timeout

    async def execute(self, provider: ProviderDescriptor, spec: RequestSpec) -> CanonicalResult:
        """Call the provider once.

        Raises:
            ProviderError: Non-2xx status, transport failure or malformed body.
            ProviderTimeoutError: No response within the effective timeout.
            QuotaExceededError: The provider had no capacity left.
        """
        wire = get_wire_format(provider.api_format)
        model = self.resolve_model(provider, spec)
        temperature = (
            spec.temperature if spec.temperature is not None else self._settings.default_temperature
        )
        max_tokens = (
            spec.max_tokens if spec.max_tokens is not None else self._settings.default_max_tokens
        )
        timeout = self.effective_timeout(spec)

        api_keys = self._registry.credentials(provider)
        if not api_keys:
            raise ProviderError(
                provider.id,
                f"No credential configured in {provider.api_key_env}",
                error_type=ErrorType.AUTH_ERROR,
            )
        api_key = await self._rotator.get_next_key(provider.id, api_keys)

        headers = wire.build_headers(api_key)
        headers.update(provider.custom_headers)
        headers["HTTP-Referer"] = self._settings.app_referer
        headers["X-Title"] = self._settings.app_title

        payload = wire.build_payload(model, spec, temperature, max_tokens)
        url = f"{provider.base_url.rstrip('/')}{wire.endpoint_path}"
        client = self._clients.get_or_create_client(provider)

        self._tracker.reserve(provider.id)

        logger.debug(f"📤 {provider.id} POST {url} model={model} max_tokens={max_tokens}")
        start = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                client.post(url, json=payload, headers=headers, timeout=timeout),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"Provider '{provider.id}' timed out after {timeout:g}s")
            raise ProviderTimeoutError(provider.id, timeout) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Provider '{provider.id}' transport error: {e}")
            raise ProviderError(
                provider.id, f"Transport error: {e}", error_type=ErrorType.TRANSPORT_ERROR
            ) from e

        latency_ms = int((time.perf_counter() - start) * 1000)

        if not response.is_success:
            detail = response.text[:200]
            logger.warning(
                f"Provider '{provider.id}' returned HTTP {response.status_code} in {latency_ms}ms"
            )
            raise ProviderError(
                provider.id,
                f"HTTP {response.status_code}: {detail}" if detail else f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            parsed = wire.parse_response(response.json())
        except (json.JSONDecodeError, ValueError) as e:
            raise ProviderError(
                provider.id,
                f"Malformed response: {e}",
                status_code=response.status_code,
                error_type=ErrorType.MALFORMED_RESPONSE,
            ) from e

        timestamp_ms = int(time.time() * 1000)
        usage = Usage.from_tokens(
            parsed.prompt_tokens,
            parsed.completion_tokens,
            provider.pricing.cost_per_1k_tokens,
            provider.pricing.currency,
        )
        result = CanonicalResult(
            id=parsed.response_id or f"ai_{timestamp_ms}",
            provider_id=provider.id,
            model=parsed.model or model,
            content=parsed.content,
            usage=usage,
            finish_reason=parsed.finish_reason,
            timestamp_ms=timestamp_ms,
            latency_ms=latency_ms,
        )

        if self._settings.log_request_metrics:
            logger.info(
                f"📥 {provider.id}/{result.model} | {latency_ms}ms | "
                f"tokens in={usage.prompt_tokens} out={usage.completion_tokens} | "
                f"cost={usage.cost_amount:.6f} {usage.currency}"
            )
        return result
