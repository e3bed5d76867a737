"""Base infrastructure for provider wire formats.

Each supported API shape implements WireFormat:
- which endpoint path chat requests are POSTed to
- how the credential is presented
- how a RequestSpec becomes the provider's native JSON body
- how the provider's JSON response becomes a ParsedCompletion
"""

import dataclasses
from abc import ABC, abstractmethod
from typing import Any

from ai_router.core.models import RequestSpec


@dataclasses.dataclass(frozen=True)
class ParsedCompletion:
    """Provider-neutral fields extracted from a response body.

    Attributes:
        content: Generated text
        prompt_tokens: Input tokens reported by the provider, 0 if absent
        completion_tokens: Output tokens reported by the provider, 0 if absent
        finish_reason: Provider stop reason, "unknown" if absent
        response_id: Provider response id, None if absent
        model: Model the provider reports having used, None if absent
    """

    content: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    finish_reason: str = "unknown"
    response_id: str | None = None
    model: str | None = None


class WireFormat(ABC):
    """Base class for provider API shapes."""

    endpoint_path: str = "/chat/completions"

    @abstractmethod
    def build_headers(self, api_key: str) -> dict[str, str]:
        """Auth and content headers for one call."""

    @abstractmethod
    def build_payload(
        self,
        model: str,
        spec: RequestSpec,
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        """Native JSON body for the request."""

    @abstractmethod
    def parse_response(self, data: Any) -> ParsedCompletion:
        """Extract the completion from a decoded JSON body.

        Raises:
            ValueError: If the body does not have the expected shape.
        """

    @property
    def name(self) -> str:
        """Human-readable name for logging and debugging."""
        return self.__class__.__name__


def token_count(value: Any) -> int:
    """Coerce a reported token count, treating missing or invalid values as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        return max(0, int(value))
    return 0
