import math

import httpx
import pytest

from ai_router.core.capabilities import Capability, OptimizationGoal
from ai_router.core.config import RouterConfig
from ai_router.core.exceptions import AggregateFailure, ConfigurationError, RouterError
from ai_router.core.models import RequestSpec, RoutedResult
from ai_router.engine import MAX_BATCH_SIZE, build_engine
from tests.fixtures.providers import make_engine, make_provider


def _url(provider_id: str, path: str = "/chat/completions") -> str:
    return f"https://api.{provider_id}.test/v1{path}"


@pytest.mark.asyncio
class TestRoute:
    async def test_routes_to_highest_priority(
        self, two_providers, two_provider_env, mock_providers, openai_chat_completion
    ):
        engine = make_engine(two_providers, two_provider_env)
        mock_providers.post(_url("alpha")).respond(200, json=openai_chat_completion)

        routed = await engine.route(RequestSpec.from_prompt("hi"))

        assert routed.result.provider_id == "alpha"
        assert routed.to_dict()["usage"]["totalTokens"] == 1500
        assert "fallback" not in routed.to_dict()

    async def test_cost_goal_picks_cheapest(
        self, two_providers, two_provider_env, mock_providers, openai_chat_completion
    ):
        engine = make_engine(two_providers, two_provider_env)
        mock_providers.post(_url("beta")).respond(200, json=openai_chat_completion)

        routed = await engine.route(RequestSpec.from_prompt("hi", goal=OptimizationGoal.COST))

        assert routed.result.provider_id == "beta"

    async def test_explicit_provider_without_credential_is_not_substituted(
        self, two_providers, mock_providers
    ):
        engine = make_engine(two_providers, {"BETA_API_KEY": "b"})

        with pytest.raises(ConfigurationError, match="alpha"):
            await engine.route(RequestSpec.from_prompt("hi", provider_id="alpha"))

        assert not mock_providers.calls

    async def test_explicit_provider_falls_back_on_runtime_failure(
        self, two_providers, two_provider_env, mock_providers, openai_chat_completion
    ):
        engine = make_engine(two_providers, two_provider_env)
        mock_providers.post(_url("beta")).respond(500)
        mock_providers.post(_url("alpha")).respond(200, json=openai_chat_completion)

        routed = await engine.route(RequestSpec.from_prompt("hi", provider_id="beta"))

        assert routed.result.provider_id == "alpha"
        payload = routed.to_dict()
        assert payload["fallback"]["attempts"][0]["provider"] == "beta"
        assert payload["fallback"]["note"].startswith("Fallback response from alpha")

    async def test_no_credentials_anywhere(self, two_providers):
        engine = make_engine(two_providers, {})

        with pytest.raises(ConfigurationError) as exc_info:
            await engine.route(RequestSpec.from_prompt("hi"))

        assert exc_info.value.to_dict()["code"] == "NO_PROVIDER_AVAILABLE"

    async def test_unsupported_capability(self, two_providers, two_provider_env):
        engine = make_engine(two_providers, two_provider_env)

        with pytest.raises(ConfigurationError, match="image_generation"):
            await engine.route(
                RequestSpec.from_prompt("draw", capability=Capability.IMAGE_GENERATION)
            )

    async def test_quota_exhausted_primary_routes_to_next(
        self, mock_providers, openai_chat_completion
    ):
        alpha = make_provider("alpha", priority=1, requests_per_day=1)
        beta = make_provider("beta", priority=2)
        engine = make_engine([alpha, beta], {"ALPHA_API_KEY": "a", "BETA_API_KEY": "b"})
        mock_providers.post(_url("alpha")).respond(200, json=openai_chat_completion)
        mock_providers.post(_url("beta")).respond(200, json=openai_chat_completion)

        first = await engine.route(RequestSpec.from_prompt("one"))
        second = await engine.route(RequestSpec.from_prompt("two"))

        assert first.result.provider_id == "alpha"
        assert second.result.provider_id == "beta"
        assert second.attempts == ()

    async def test_every_provider_failing(self, two_providers, two_provider_env, mock_providers):
        engine = make_engine(two_providers, two_provider_env)
        mock_providers.post(_url("alpha")).respond(500)
        mock_providers.post(_url("beta")).respond(500)

        with pytest.raises(AggregateFailure) as exc_info:
            await engine.route(RequestSpec.from_prompt("hi"))

        assert len(exc_info.value.attempts) == 2


@pytest.mark.asyncio
class TestRouteMany:
    async def test_mixed_results_keep_order(
        self, two_providers, mock_providers, openai_chat_completion
    ):
        engine = make_engine(two_providers, {"ALPHA_API_KEY": "a"})
        mock_providers.post(_url("alpha")).respond(200, json=openai_chat_completion)

        results = await engine.route_many(
            [
                RequestSpec.from_prompt("one"),
                RequestSpec.from_prompt("two", provider_id="beta"),
                RequestSpec.from_prompt("three"),
            ]
        )

        assert isinstance(results[0], RoutedResult)
        assert isinstance(results[1], ConfigurationError)
        assert isinstance(results[2], RoutedResult)

    async def test_failure_items_are_router_errors(self, two_providers, two_provider_env, mock_providers):
        engine = make_engine(two_providers, two_provider_env)
        mock_providers.post(_url("alpha")).respond(500)
        mock_providers.post(_url("beta")).respond(500)

        results = await engine.route_many([RequestSpec.from_prompt("hi")])

        assert isinstance(results[0], RouterError)

    async def test_unexpected_error_raised_after_siblings_finish(
        self, two_providers, two_provider_env, mock_providers, openai_chat_completion
    ):
        engine = make_engine(two_providers, two_provider_env)
        alpha = mock_providers.post(_url("alpha")).respond(200, json=openai_chat_completion)
        route = engine.route

        async def route_or_crash(spec):
            if spec.prompt == "crash":
                raise RuntimeError("bug in routing")
            return await route(spec)

        engine.route = route_or_crash

        with pytest.raises(RuntimeError, match="bug in routing"):
            await engine.route_many(
                [
                    RequestSpec.from_prompt("one"),
                    RequestSpec.from_prompt("crash"),
                    RequestSpec.from_prompt("two"),
                ]
            )

        assert alpha.call_count == 2

    async def test_rejects_oversized_batch(self, two_providers, two_provider_env):
        engine = make_engine(two_providers, two_provider_env)
        specs = [RequestSpec.from_prompt("hi")] * (MAX_BATCH_SIZE + 1)

        with pytest.raises(ValueError, match="at most"):
            await engine.route_many(specs)

    async def test_rejects_empty_batch(self, two_providers, two_provider_env):
        engine = make_engine(two_providers, two_provider_env)

        with pytest.raises(ValueError):
            await engine.route_many([])


class TestEstimateCost:
    def test_uses_best_chat_provider(self, two_providers, two_provider_env):
        engine = make_engine(two_providers, two_provider_env)
        message = "x" * 10

        estimate = engine.estimate_cost(message, max_tokens=100)

        assert estimate.provider_id == "alpha"
        assert estimate.input_tokens == math.ceil(10 / 4)
        assert estimate.output_tokens == 80
        assert estimate.total_tokens == 83
        assert estimate.cost_amount == pytest.approx(83 / 1000 * 0.002)
        assert estimate.model == "alpha-model-a"

    def test_named_provider_and_model(self, two_providers, two_provider_env):
        engine = make_engine(two_providers, two_provider_env)

        estimate = engine.estimate_cost("hello", provider_id="beta", model="beta-model-b")

        assert estimate.provider_id == "beta"
        assert estimate.output_tokens == 800
        assert estimate.to_dict()["provider"]["model"] == "beta-model-b"

    def test_does_not_consume_quota(self, two_providers, two_provider_env):
        engine = make_engine(two_providers, two_provider_env)

        engine.estimate_cost("hello")

        assert engine.tracker.usage("alpha").requests_today == 0

    def test_uncredentialed_provider_rejected(self, two_providers):
        engine = make_engine(two_providers, {"ALPHA_API_KEY": "a"})

        with pytest.raises(ConfigurationError):
            engine.estimate_cost("hello", provider_id="beta")


class TestUsageStats:
    def test_only_credentialed_providers_reported(self, two_providers):
        engine = make_engine(two_providers, {"ALPHA_API_KEY": "a"})
        engine.tracker.record("alpha")

        summary = engine.usage_stats().to_dict()

        assert [p["providerId"] for p in summary["providers"]] == ["alpha"]
        assert summary["providers"][0]["provider"] == "Alpha"
        assert summary["summary"]["totalRequests"] == 1
        assert summary["summary"]["totalLimit"] == 100
        assert summary["summary"]["utilizationPercentage"] == pytest.approx(1.0)
        assert summary["summary"]["activeProviders"] == 1


@pytest.mark.asyncio
class TestHealth:
    async def test_probe_results(self, two_providers, two_provider_env, mock_providers):
        engine = make_engine(two_providers, two_provider_env)
        alpha = mock_providers.get(_url("alpha", "/models")).respond(200, json={"data": []})
        mock_providers.get(_url("beta", "/models")).mock(side_effect=httpx.ConnectError("down"))

        results = await engine.check_health()

        assert results == {"alpha": True, "beta": False}
        assert alpha.calls.last.request.headers["Authorization"] == "Bearer alpha-key"

    async def test_error_status_is_unhealthy(self, two_providers, mock_providers):
        engine = make_engine(two_providers, {"BETA_API_KEY": "b"})
        mock_providers.get(_url("beta", "/models")).respond(401)

        assert await engine.check_health() == {"beta": False}

    async def test_unparseable_probe_url_is_unhealthy(
        self, two_providers, two_provider_env, mock_providers
    ):
        engine = make_engine(two_providers, two_provider_env)
        mock_providers.get(_url("alpha", "/models")).respond(200)
        mock_providers.get(_url("beta", "/models")).mock(
            side_effect=httpx.InvalidURL("Invalid port: ':1'")
        )

        assert await engine.check_health() == {"alpha": True, "beta": False}

    async def test_probes_do_not_count_quota(self, two_providers, two_provider_env, mock_providers):
        engine = make_engine(two_providers, two_provider_env)
        mock_providers.get(_url("alpha", "/models")).respond(200)
        mock_providers.get(_url("beta", "/models")).respond(200)

        await engine.check_health()

        assert engine.tracker.usage("alpha").requests_today == 0


class TestCatalog:
    def test_catalog_lists_all_without_secrets(self, two_providers):
        engine = make_engine(two_providers, {"ALPHA_API_KEY": "secret"})

        catalog = engine.provider_catalog()

        assert list(catalog["providers"]) == ["alpha", "beta"]
        assert catalog["credentials"] == {"alpha": True, "beta": False}
        alpha = catalog["providers"]["alpha"]
        assert alpha["pricing"] == {"costPer1KTokens": 0.002, "currency": "USD"}
        assert alpha["rateLimit"] == {"requestsPerMinute": 60, "requestsPerDay": 100}
        assert alpha["capabilities"] == ["chat", "code_generation"]
        assert "secret" not in str(catalog)


class TestBuildEngine:
    def test_builtin_catalog_with_one_credential(self):
        engine = build_engine(
            settings=RouterConfig(log_request_metrics=False), environ={"GROQ_API_KEY": "g"}
        )

        assert len(engine.registry.list_providers()) == 6
        assert [p.id for p in engine.availability.available_providers()] == ["groq"]

    def test_settings_loaded_from_environ(self):
        engine = build_engine(environ={"MAX_FALLBACK_ATTEMPTS": "0"})

        assert engine.settings.max_fallback_attempts == 0

    def test_load_results_hash_keys(self):
        engine = build_engine(
            settings=RouterConfig(log_request_metrics=False),
            environ={"OPENAI_API_KEY": "sk-test"},
        )

        results = {r.name: r for r in engine.load_results()}

        assert results["openai"].status == "success"
        assert results["openai"].api_key_hash not in (None, "sk-test")
        assert results["groq"].status == "missing"
