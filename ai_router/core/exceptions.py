"""
Exception hierarchy for the routing engine.

All exceptions inherit from RouterError, allowing callers to catch every
engine-level failure with a single except clause and render it with
``to_dict()``.

Only ConfigurationError and AggregateFailure escape RoutingEngine.route();
provider-level errors are consumed by the fallback controller.

Example:
    >>> try:
    ...     routed = await engine.route(spec)
    ... except RouterError as e:
    ...     return JSONResponse(status_code=503, content=e.to_dict())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ai_router.core.error_types import ErrorType, FailureCode, classify_status

if TYPE_CHECKING:
    from ai_router.core.models import FallbackAttempt


class RouterError(Exception):
    """Base exception for all routing errors.

    Attributes:
        code: Machine-readable failure code
        message: Human-readable explanation
    """

    code: FailureCode = FailureCode.PROVIDER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Structured failure payload for the HTTP/persistence layer."""
        return {"code": self.code.value, "message": self.message}


class ConfigurationError(RouterError):
    """Raised when no usable provider exists for a request.

    Covers missing credentials for every provider offering the requested
    capability, and an explicitly requested provider that is unknown,
    lacks a credential or is over quota. Fatal to the single request only.
    """

    code = FailureCode.NO_PROVIDER_AVAILABLE


class ProviderError(RouterError):
    """Raised when a provider call fails.

    Attributes:
        provider_id: Provider that failed
        status_code: Upstream HTTP status, None for transport failures
    """

    code = FailureCode.PROVIDER_ERROR

    def __init__(
        self,
        provider_id: str,
        message: str,
        status_code: int | None = None,
        error_type: ErrorType | None = None,
    ) -> None:
        self.provider_id = provider_id
        self.status_code = status_code
        self.error_type = error_type or classify_status(status_code)
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(provider_id={self.provider_id!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class ProviderTimeoutError(ProviderError):
    """Raised when a provider does not respond within the bounded duration.

    Treated identically to ProviderError for fallback purposes.
    """

    code = FailureCode.PROVIDER_TIMEOUT

    def __init__(self, provider_id: str, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            provider_id,
            f"Provider '{provider_id}' did not respond within {timeout_seconds:g}s",
            status_code=None,
            error_type=ErrorType.UPSTREAM_TIMEOUT,
        )


class QuotaExceededError(RouterError):
    """Raised when a provider has no remaining request capacity.

    The provider is excluded before any call is attempted, so this is
    never recorded as a fallback attempt.
    """

    code = FailureCode.QUOTA_EXCEEDED

    def __init__(self, provider_id: str, window: str = "day") -> None:
        self.provider_id = provider_id
        self.window = window
        super().__init__(f"Provider '{provider_id}' has no remaining capacity this {window}")


class AggregateFailure(RouterError):
    """Raised when every candidate in the fallback chain failed.

    Attributes:
        last_error: The error raised by the final attempt
        attempts: One FallbackAttempt per failed provider call, in order
    """

    code = FailureCode.ALL_PROVIDERS_FAILED

    def __init__(
        self,
        attempts: list[FallbackAttempt],
        last_error: RouterError | None = None,
    ) -> None:
        self.attempts = list(attempts)
        self.last_error = last_error
        tried = ", ".join(a.provider_id for a in self.attempts) or "none"
        detail = f": {last_error.message}" if last_error else ""
        super().__init__(f"All AI providers failed (tried: {tried}){detail}")

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["attempts"] = [attempt.to_dict() for attempt in self.attempts]
        return payload
