"""Built-in provider catalog.

Priorities, budgets and prices describe the free/low tiers the router was
tuned against. Every field can be overridden through the TOML catalog file
or ``{ID}_BASE_URL`` / ``{ID}_CUSTOM_HEADER_*`` environment variables.
"""

from ai_router.core.capabilities import Capability
from ai_router.core.provider_config import Pricing, ProviderDescriptor, RateLimit

_CHAT_CODE = frozenset({Capability.CHAT, Capability.CODE_GENERATION})
_CHAT_CODE_EMBED = _CHAT_CODE | {Capability.EMBEDDINGS}

DEFAULT_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        id="openrouter",
        name="OpenRouter (MiniMax M2)",
        base_url="https://openrouter.ai/api/v1",
        api_key_env="OPENROUTER_API_KEY",
        models=(
            "minimax/maximum-120k-01",
            "minimax/abab6.5s-chat",
            "anthropic/claude-3.5-sonnet",
            "openai/gpt-4",
            "meta-llama/llama-3.1-70b-instruct",
        ),
        priority=1,
        rate_limit=RateLimit(requests_per_minute=100, requests_per_day=10000),
        capabilities=_CHAT_CODE_EMBED,
        pricing=Pricing(cost_per_1k_tokens=0.001),
    ),
    ProviderDescriptor(
        id="openai",
        name="OpenAI GPT-4",
        base_url="https://api.openai.com/v1",
        api_key_env="OPENAI_API_KEY",
        models=("gpt-4", "gpt-4-turbo", "gpt-3.5-turbo"),
        priority=2,
        rate_limit=RateLimit(requests_per_minute=50, requests_per_day=5000),
        capabilities=_CHAT_CODE_EMBED | {Capability.IMAGE_GENERATION},
        pricing=Pricing(cost_per_1k_tokens=0.03),
    ),
    ProviderDescriptor(
        id="anthropic",
        name="Anthropic Claude",
        base_url="https://api.anthropic.com/v1",
        api_key_env="ANTHROPIC_API_KEY",
        models=(
            "claude-3-5-sonnet-20241022",
            "claude-3-5-haiku-20241022",
            "claude-3-opus-20240229",
        ),
        priority=3,
        rate_limit=RateLimit(requests_per_minute=30, requests_per_day=3000),
        capabilities=_CHAT_CODE,
        pricing=Pricing(cost_per_1k_tokens=0.015),
        api_format="anthropic",
    ),
    ProviderDescriptor(
        id="cohere",
        name="Cohere Command",
        base_url="https://api.cohere.ai/v1",
        api_key_env="COHERE_API_KEY",
        models=("command", "command-nightly", "command-r"),
        priority=4,
        rate_limit=RateLimit(requests_per_minute=20, requests_per_day=2000),
        capabilities=_CHAT_CODE_EMBED,
        pricing=Pricing(cost_per_1k_tokens=0.0015),
        api_format="cohere",
    ),
    ProviderDescriptor(
        id="groq",
        name="Groq Llama",
        base_url="https://api.groq.com/openai/v1",
        api_key_env="GROQ_API_KEY",
        models=("llama-3.1-70b-versatile", "llama-3.1-8b-instant", "mixtral-8x7b-32768"),
        priority=5,
        rate_limit=RateLimit(requests_per_minute=25, requests_per_day=2500),
        capabilities=_CHAT_CODE,
        pricing=Pricing(cost_per_1k_tokens=0.0001),
    ),
    ProviderDescriptor(
        id="together",
        name="Together AI",
        base_url="https://api.together.xyz/v1",
        api_key_env="TOGETHER_API_KEY",
        models=(
            "meta-llama/Llama-3.1-70B-Instruct-Turbo",
            "mistralai/Mixtral-8x7B-Instruct-v0.1",
            "deepseek-chat/deepseek-chat",
        ),
        priority=6,
        rate_limit=RateLimit(requests_per_minute=40, requests_per_day=4000),
        capabilities=_CHAT_CODE_EMBED,
        pricing=Pricing(cost_per_1k_tokens=0.0008),
    ),
)
