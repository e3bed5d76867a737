from dataclasses import dataclass, field

import httpx

from ai_router.core.capabilities import Capability

SUPPORTED_API_FORMATS = ("openai", "anthropic", "cohere")
SUPPORTED_URL_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class RateLimit:
    """Declared request budget for a provider"""

    requests_per_minute: int
    requests_per_day: int

    def __post_init__(self) -> None:
        if self.requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be positive")
        if self.requests_per_day <= 0:
            raise ValueError("requests_per_day must be positive")


@dataclass(frozen=True)
class Pricing:
    """Flat per-token pricing for a provider"""

    cost_per_1k_tokens: float
    currency: str = "USD"

    def __post_init__(self) -> None:
        if self.cost_per_1k_tokens < 0:
            raise ValueError("cost_per_1k_tokens cannot be negative")


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static description of an AI provider.

    Descriptors are immutable after startup. Credentials are never stored on
    the descriptor; ``api_key_env`` names the environment variable holding
    them and the registry resolves it.
    """

    id: str
    name: str
    base_url: str
    api_key_env: str
    models: tuple[str, ...]
    priority: int
    rate_limit: RateLimit
    capabilities: frozenset[Capability]
    pricing: Pricing
    api_format: str = "openai"  # "openai", "anthropic" or "cohere"
    custom_headers: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    @property
    def default_model(self) -> str:
        """First configured model, used when the request names none"""
        return self.models[0]

    def supports(self, capability: Capability) -> bool:
        """Check if this provider declares the given capability"""
        return capability in self.capabilities

    def __post_init__(self) -> None:
        """Validate configuration after initialization"""
        if not self.id:
            raise ValueError("Provider id is required")
        if not self.base_url:
            raise ValueError(f"Base URL is required for provider '{self.id}'")
        _validate_base_url(self.id, self.base_url)
        if not self.api_key_env:
            raise ValueError(f"Credential environment variable is required for provider '{self.id}'")
        if not self.models:
            raise ValueError(f"At least one model is required for provider '{self.id}'")
        if self.api_format not in SUPPORTED_API_FORMATS:
            raise ValueError(
                f"Invalid API format '{self.api_format}' for provider '{self.id}'. "
                f"Must be one of: {', '.join(SUPPORTED_API_FORMATS)}"
            )


def _validate_base_url(provider_id: str, base_url: str) -> None:
    """Reject base URLs httpx cannot send to, so bad config fails at startup."""
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise ValueError(f"Invalid base URL '{base_url}' for provider '{provider_id}': {e}") from e
    if url.scheme not in SUPPORTED_URL_SCHEMES or not url.host:
        raise ValueError(
            f"Invalid base URL '{base_url}' for provider '{provider_id}': "
            "expected an http(s) URL with a host"
        )
