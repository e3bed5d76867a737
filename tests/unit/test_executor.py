import asyncio
import json

import httpx
import pytest

from ai_router.core.config import RouterConfig
from ai_router.core.error_types import ErrorType
from ai_router.core.exceptions import ProviderError, ProviderTimeoutError, QuotaExceededError
from ai_router.core.models import RequestSpec
from tests.fixtures.mock_http import create_openai_error
from tests.fixtures.providers import make_engine, make_provider

ALPHA_URL = "https://api.alpha.test/v1/chat/completions"


@pytest.fixture
def alpha():
    return make_provider("alpha", cost=0.002, requests_per_day=10)


@pytest.fixture
def engine(alpha):
    return make_engine([alpha], {"ALPHA_API_KEY": "alpha-key"})


@pytest.mark.asyncio
class TestRequestExecutor:
    async def test_cost_computed_from_total_tokens(
        self, engine, alpha, mock_providers, openai_chat_completion
    ):
        mock_providers.post(ALPHA_URL).respond(200, json=openai_chat_completion)

        result = await engine.executor.execute(alpha, RequestSpec.from_prompt("hi"))

        assert result.usage.total_tokens == 1500
        assert result.usage.cost_amount == pytest.approx(0.003)
        assert result.usage.currency == "USD"
        assert result.provider_id == "alpha"
        assert result.content == "Hello! How can I help you today?"
        assert result.finish_reason == "stop"
        assert result.id == "chatcmpl-123"
        assert result.latency_ms >= 0

    async def test_request_shape(self, engine, alpha, mock_providers, openai_chat_completion):
        route = mock_providers.post(ALPHA_URL).respond(200, json=openai_chat_completion)

        await engine.executor.execute(
            alpha, RequestSpec.from_prompt("hi", system_prompt="sys", temperature=0.2)
        )

        request = route.calls.last.request
        body = json.loads(request.content)
        assert request.headers["Authorization"] == "Bearer alpha-key"
        assert request.headers["HTTP-Referer"] == "http://localhost:3000"
        assert request.headers["X-Title"] == "AI Router"
        assert body["model"] == "alpha-model-a"
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 1000
        assert body["messages"][0] == {"role": "system", "content": "sys"}

    async def test_foreign_model_replaced_by_default(
        self, engine, alpha, mock_providers, openai_chat_completion
    ):
        route = mock_providers.post(ALPHA_URL).respond(200, json=openai_chat_completion)

        await engine.executor.execute(alpha, RequestSpec.from_prompt("hi", model="other-model"))

        body = json.loads(route.calls.last.request.content)
        assert body["model"] == "alpha-model-a"

    async def test_explicit_provider_model_passes_through(
        self, engine, alpha, mock_providers, openai_chat_completion
    ):
        route = mock_providers.post(ALPHA_URL).respond(200, json=openai_chat_completion)

        await engine.executor.execute(
            alpha, RequestSpec.from_prompt("hi", provider_id="alpha", model="alpha-preview")
        )

        body = json.loads(route.calls.last.request.content)
        assert body["model"] == "alpha-preview"

    async def test_missing_usage_counts_as_zero_cost(
        self, engine, alpha, mock_providers, openai_completion_without_usage
    ):
        mock_providers.post(ALPHA_URL).respond(200, json=openai_completion_without_usage)

        result = await engine.executor.execute(alpha, RequestSpec.from_prompt("hi"))

        assert result.usage.total_tokens == 0
        assert result.usage.cost_amount == 0
        assert result.finish_reason == "unknown"
        assert result.id.startswith("ai_")

    async def test_non_2xx_raises_and_still_counts_quota(self, engine, alpha, mock_providers):
        mock_providers.post(ALPHA_URL).respond(
            429, json=create_openai_error(429, "rate_limit_error", "slow down")
        )

        with pytest.raises(ProviderError) as exc_info:
            await engine.executor.execute(alpha, RequestSpec.from_prompt("hi"))

        assert exc_info.value.status_code == 429
        assert exc_info.value.error_type == ErrorType.RATE_LIMIT
        assert engine.tracker.remaining("alpha") == 9

    async def test_transport_error(self, engine, alpha, mock_providers):
        mock_providers.post(ALPHA_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ProviderError) as exc_info:
            await engine.executor.execute(alpha, RequestSpec.from_prompt("hi"))

        assert exc_info.value.status_code is None
        assert exc_info.value.error_type == ErrorType.TRANSPORT_ERROR

    async def test_httpx_timeout_becomes_provider_timeout(self, engine, alpha, mock_providers):
        mock_providers.post(ALPHA_URL).mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(ProviderTimeoutError) as exc_info:
            await engine.executor.execute(alpha, RequestSpec.from_prompt("hi"))

        assert exc_info.value.error_type == ErrorType.UPSTREAM_TIMEOUT

    async def test_caller_timeout_aborts_call(self, alpha, mock_providers, openai_chat_completion):
        engine = make_engine(
            [alpha],
            {"ALPHA_API_KEY": "k"},
            settings=RouterConfig(log_request_metrics=False, request_timeout=30),
        )

        async def slow(request):
            await asyncio.sleep(1)
            return httpx.Response(200, json=openai_chat_completion)

        mock_providers.post(ALPHA_URL).mock(side_effect=slow)

        with pytest.raises(ProviderTimeoutError) as exc_info:
            await engine.executor.execute(
                alpha, RequestSpec.from_prompt("hi", timeout_seconds=0.05)
            )

        assert exc_info.value.timeout_seconds == 0.05

    async def test_malformed_body(self, engine, alpha, mock_providers):
        mock_providers.post(ALPHA_URL).respond(200, text="not json")

        with pytest.raises(ProviderError) as exc_info:
            await engine.executor.execute(alpha, RequestSpec.from_prompt("hi"))

        assert exc_info.value.error_type == ErrorType.MALFORMED_RESPONSE

    async def test_quota_exhausted_raises_before_dispatch(self, mock_providers):
        limited = make_provider("alpha", requests_per_day=1)
        engine = make_engine([limited], {"ALPHA_API_KEY": "k"})
        engine.tracker.record("alpha")
        route = mock_providers.post(ALPHA_URL)

        with pytest.raises(QuotaExceededError):
            await engine.executor.execute(limited, RequestSpec.from_prompt("hi"))

        assert not route.called

    async def test_keys_rotate_round_robin(self, alpha, mock_providers, openai_chat_completion):
        engine = make_engine([alpha], {"ALPHA_API_KEY": "k1 k2"})
        route = mock_providers.post(ALPHA_URL).respond(200, json=openai_chat_completion)

        for _ in range(3):
            await engine.executor.execute(alpha, RequestSpec.from_prompt("hi"))

        keys = [call.request.headers["Authorization"] for call in route.calls]
        assert keys == ["Bearer k1", "Bearer k2", "Bearer k1"]

    async def test_anthropic_provider(self, mock_providers, anthropic_message_response):
        claude = make_provider("claude", api_format="anthropic", cost=0.015)
        engine = make_engine([claude], {"CLAUDE_API_KEY": "sk-ant"})
        route = mock_providers.post("https://api.claude.test/v1/messages").respond(
            200, json=anthropic_message_response
        )

        result = await engine.executor.execute(claude, RequestSpec.from_prompt("hi"))

        assert route.calls.last.request.headers["x-api-key"] == "sk-ant"
        assert result.content == "Hello from Claude."
        assert result.usage.total_tokens == 20
