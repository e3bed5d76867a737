"""Request and result data containers for the routing engine.

All containers are plain dataclasses. Results are frozen: a CanonicalResult
is produced once per successful execution and never modified afterwards.
``to_dict()`` renders the camelCase wire shape consumed by the HTTP layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ai_router.core.capabilities import Capability, OptimizationGoal
from ai_router.core.error_types import ErrorType

ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


@dataclass(frozen=True, slots=True)
class RequestSpec:
    """Normalized, already-validated inbound request.

    Attributes:
        messages: Conversation as a list of {"role", "content"} dicts
        system_prompt: Optional system prompt prepended to the messages
        provider_id: Explicit provider choice, bypasses ranking
        model: Explicit model, otherwise the provider's first model
        goal: Ranking goal for automatic selection
        max_cost: Maximum accepted cost per 1K tokens
        temperature: Sampling temperature, None for the configured default
        max_tokens: Completion token limit, None for the configured default
        capability: Capability a provider must declare to be selected
        timeout_seconds: Caller-level deadline for each provider call
    """

    messages: tuple[dict[str, str], ...]
    system_prompt: str | None = None
    provider_id: str | None = None
    model: str | None = None
    goal: OptimizationGoal | None = None
    max_cost: float | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    capability: Capability = Capability.CHAT
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        if not self.messages:
            raise ValueError("RequestSpec requires at least one message")
        # Accept any sequence; store an immutable copy
        object.__setattr__(self, "messages", tuple(dict(m) for m in self.messages))

    @classmethod
    def from_prompt(cls, prompt: str, **kwargs: Any) -> RequestSpec:
        """Build a single-turn request from a user prompt."""
        return cls(messages=({"role": ROLE_USER, "content": prompt},), **kwargs)

    @property
    def prompt(self) -> str:
        """Content of the last user message."""
        for message in reversed(self.messages):
            if message.get("role") == ROLE_USER:
                return message.get("content", "")
        return ""

    def conversation(self) -> list[dict[str, str]]:
        """Messages with the system prompt, if any, prepended."""
        messages = [dict(m) for m in self.messages]
        if self.system_prompt and self.system_prompt.strip():
            messages.insert(0, {"role": ROLE_SYSTEM, "content": self.system_prompt.strip()})
        return messages


@dataclass(frozen=True, slots=True)
class Usage:
    """Token usage and computed cost of one completion."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    cost_amount: float
    currency: str

    @classmethod
    def from_tokens(
        cls,
        prompt_tokens: int,
        completion_tokens: int,
        cost_per_1k_tokens: float,
        currency: str,
    ) -> Usage:
        total = prompt_tokens + completion_tokens
        return cls(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total,
            cost_amount=(total / 1000) * cost_per_1k_tokens,
            currency=currency,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "promptTokens": self.prompt_tokens,
            "completionTokens": self.completion_tokens,
            "totalTokens": self.total_tokens,
            "cost": self.cost_amount,
            "currency": self.currency,
        }


@dataclass(frozen=True, slots=True)
class CanonicalResult:
    """Provider-agnostic completion result."""

    id: str
    provider_id: str
    model: str
    content: str
    usage: Usage
    finish_reason: str
    timestamp_ms: int
    latency_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "provider": self.provider_id,
            "model": self.model,
            "content": self.content,
            "usage": self.usage.to_dict(),
            "metadata": {
                "finishReason": self.finish_reason,
                "model": self.model,
                "timestampMs": self.timestamp_ms,
                "responseTime": self.latency_ms,
            },
        }


@dataclass(frozen=True, slots=True)
class FallbackAttempt:
    """Diagnostic record of one failed provider call."""

    provider_id: str
    error: str
    latency_ms: int
    error_type: ErrorType = ErrorType.UNEXPECTED_ERROR
    status_code: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider_id,
            "error": self.error,
            "errorType": self.error_type.value,
            "statusCode": self.status_code,
            "latencyMs": self.latency_ms,
        }


@dataclass(frozen=True, slots=True)
class RoutedResult:
    """Successful outcome of a routed request plus its fallback trail."""

    result: CanonicalResult
    attempts: tuple[FallbackAttempt, ...] = ()

    @property
    def fell_back(self) -> bool:
        return bool(self.attempts)

    def to_dict(self) -> dict[str, Any]:
        payload = self.result.to_dict()
        if self.attempts:
            payload["fallback"] = {
                "attempts": [a.to_dict() for a in self.attempts],
                "note": (
                    f"Fallback response from {self.result.provider_id} after "
                    f"{self.attempts[-1].error}"
                ),
            }
        return payload


@dataclass(frozen=True, slots=True)
class CostEstimate:
    """Pre-flight cost estimate for a message."""

    input_tokens: int
    output_tokens: int
    total_tokens: int
    cost_amount: float
    currency: str
    cost_per_1k_tokens: float
    provider_id: str
    provider_name: str
    model: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "totalTokens": self.total_tokens,
            "cost": {
                "amount": self.cost_amount,
                "currency": self.currency,
                "per1KTokens": self.cost_per_1k_tokens,
            },
            "provider": {
                "id": self.provider_id,
                "name": self.provider_name,
                "model": self.model,
            },
        }


@dataclass(frozen=True, slots=True)
class ProviderUsage:
    """Usage snapshot for one provider."""

    provider_id: str
    requests_today: int
    requests_per_day: int
    requests_last_minute: int
    requests_per_minute: int

    @property
    def remaining(self) -> int:
        return max(0, self.requests_per_day - self.requests_today)

    def to_dict(self) -> dict[str, Any]:
        return {
            "providerId": self.provider_id,
            "requests": self.requests_today,
            "limit": self.requests_per_day,
            "remaining": self.remaining,
            "requestsLastMinute": self.requests_last_minute,
            "limitPerMinute": self.requests_per_minute,
        }


@dataclass(slots=True)
class UsageSummary:
    """Aggregated usage across all credentialed providers."""

    providers: list[dict[str, Any]] = field(default_factory=list)
    total_requests: int = 0
    total_limit: int = 0
    active_providers: int = 0

    @property
    def utilization_percentage(self) -> float:
        if self.total_limit <= 0:
            return 0.0
        return (self.total_requests / self.total_limit) * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "providers": self.providers,
            "summary": {
                "totalRequests": self.total_requests,
                "totalLimit": self.total_limit,
                "utilizationPercentage": self.utilization_percentage,
                "activeProviders": self.active_providers,
                "totalProviders": len(self.providers),
            },
        }
