"""Request bodies for the routing endpoints.

Field names follow the JSON wire shape (camelCase aliases); Python code
uses the snake_case attribute names.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ai_router.core.capabilities import Capability, OptimizationGoal
from ai_router.core.models import RequestSpec
from ai_router.engine import MAX_BATCH_SIZE
from ai_router.engine.presets import code_request, creative_request

DEFAULT_SWITCH_MESSAGE = "Continue previous conversation"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Preferences(_CamelModel):
    """Routing preferences for automatic provider selection."""

    optimize_for: OptimizationGoal | None = Field(default=None, alias="optimizeFor")
    max_cost: float | None = Field(default=None, ge=0, alias="maxCost")
    features: list[Capability] = Field(default_factory=list)

    @field_validator("features", mode="before")
    @classmethod
    def _parse_features(cls, value: object) -> object:
        # Accept "codeGeneration" as well as "code_generation"
        if isinstance(value, list):
            return [Capability.parse(v) if isinstance(v, str) else v for v in value]
        return value

    def capability(self) -> Capability:
        """First requested feature, chat when none given."""
        return self.features[0] if self.features else Capability.CHAT


class ChatRequest(_CamelModel):
    """Body of POST /v1/chat."""

    message: str = Field(min_length=1, max_length=4000)
    provider: str | None = None
    model: str | None = None
    system_prompt: str | None = Field(default=None, max_length=2000, alias="systemPrompt")
    temperature: float | None = Field(default=None, ge=0, le=2)
    max_tokens: int | None = Field(default=None, ge=1, le=4000, alias="maxTokens")
    preferences: Preferences | None = None

    def to_spec(self) -> RequestSpec:
        prefs = self.preferences or Preferences()
        return RequestSpec.from_prompt(
            self.message,
            system_prompt=self.system_prompt,
            provider_id=self.provider,
            model=self.model,
            goal=prefs.optimize_for,
            max_cost=prefs.max_cost,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            capability=prefs.capability(),
        )


class CodeRequest(_CamelModel):
    """Body of POST /v1/code."""

    message: str = Field(min_length=1, max_length=4000)
    language: str | None = None
    framework: str | None = None
    provider: str | None = None
    model: str | None = None
    temperature: float | None = Field(default=None, ge=0, le=2)
    max_tokens: int | None = Field(default=None, ge=1, le=4000, alias="maxTokens")

    def to_spec(self) -> RequestSpec:
        return code_request(
            self.message,
            language=self.language,
            framework=self.framework,
            provider_id=self.provider,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )


class CreativeRequest(_CamelModel):
    """Body of POST /v1/creative."""

    message: str = Field(min_length=1, max_length=4000)
    style: Literal["creative", "professional", "casual", "technical"] = "creative"
    length: Literal["short", "medium", "long"] = "medium"
    provider: str | None = None
    model: str | None = None

    def to_spec(self) -> RequestSpec:
        return creative_request(
            self.message,
            style=self.style,
            length=self.length,
            provider_id=self.provider,
            model=self.model,
        )


class BatchRequest(_CamelModel):
    """Body of POST /v1/batch."""

    requests: list[ChatRequest] = Field(min_length=1, max_length=MAX_BATCH_SIZE)


class CostEstimateRequest(_CamelModel):
    """Body of POST /v1/cost-estimate."""

    message: str = Field(min_length=1, max_length=4000)
    provider: str | None = None
    model: str | None = None
    max_tokens: int = Field(default=1000, ge=1, le=4000, alias="maxTokens")


class SwitchProviderRequest(_CamelModel):
    """Body of POST /v1/switch-provider."""

    current_provider: str = Field(min_length=1, alias="currentProvider")
    reason: str | None = Field(default=None, max_length=500)
    request_data: dict[str, Any] | None = Field(default=None, alias="requestData")

    def message(self) -> str:
        message = (self.request_data or {}).get("message")
        if isinstance(message, str) and message.strip():
            return message
        return DEFAULT_SWITCH_MESSAGE

    def to_spec(self) -> RequestSpec:
        """Re-route the conversation for quality, letting the router pick again."""
        return RequestSpec.from_prompt(
            self.message(), goal=OptimizationGoal.QUALITY, capability=Capability.CHAT
        )
