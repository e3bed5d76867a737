import pytest

from ai_router.core.capabilities import Capability
from ai_router.core.exceptions import ProviderError, ProviderTimeoutError, QuotaExceededError
from ai_router.core.error_types import ErrorType
from ai_router.core.models import RequestSpec, Usage


class TestCapabilityParse:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("chat", Capability.CHAT),
            ("CHAT", Capability.CHAT),
            ("code_generation", Capability.CODE_GENERATION),
            ("codeGeneration", Capability.CODE_GENERATION),
            ("image-generation", Capability.IMAGE_GENERATION),
            (Capability.EMBEDDINGS, Capability.EMBEDDINGS),
        ],
    )
    def test_accepted_spellings(self, raw, expected):
        assert Capability.parse(raw) is expected

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown capability"):
            Capability.parse("telepathy")


class TestRequestSpec:
    def test_requires_a_message(self):
        with pytest.raises(ValueError):
            RequestSpec(messages=[])

    def test_messages_are_copied(self):
        messages = [{"role": "user", "content": "hi"}]
        spec = RequestSpec(messages=messages)

        messages[0]["content"] = "changed"

        assert spec.prompt == "hi"

    def test_conversation_prepends_stripped_system_prompt(self):
        spec = RequestSpec.from_prompt("hi", system_prompt=" be brief ")

        assert spec.conversation() == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
        ]


class TestUsage:
    def test_cost_from_total_tokens(self):
        usage = Usage.from_tokens(500, 1000, 0.002, "USD")

        assert usage.total_tokens == 1500
        assert usage.cost_amount == pytest.approx(0.003)
        assert usage.to_dict()["totalTokens"] == 1500


class TestProviderErrors:
    def test_status_classification(self):
        assert ProviderError("p", "x", status_code=401).error_type == ErrorType.AUTH_ERROR
        assert ProviderError("p", "x", status_code=429).error_type == ErrorType.RATE_LIMIT
        assert ProviderError("p", "x").error_type == ErrorType.TRANSPORT_ERROR

    def test_timeout_message(self):
        error = ProviderTimeoutError("groq", 2.5)

        assert "2.5s" in error.message
        assert error.to_dict()["code"] == "PROVIDER_TIMEOUT"

    def test_quota_window_in_message(self):
        assert "this minute" in QuotaExceededError("groq", window="minute").message
