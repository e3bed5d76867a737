"""Error type enumerations for AI Router.

Provides type-safe error categorization for fallback diagnostics and
caller-visible failure responses.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error categories recorded on each failed provider attempt.

    These error types are used for:
    - FallbackAttempt.error_type
    - Log lines emitted by the fallback controller
    - Error aggregation in diagnostics
    """

    # Request lifecycle errors
    UPSTREAM_TIMEOUT = "upstream_timeout"  # Provider did not answer in time
    TRANSPORT_ERROR = "transport_error"  # Connection reset, DNS failure, ...

    # HTTP/API errors
    UPSTREAM_HTTP_ERROR = "upstream_http_error"  # Generic non-2xx status
    MALFORMED_RESPONSE = "malformed_response"  # 2xx with an unusable body

    # Authentication/rate limiting
    AUTH_ERROR = "auth_error"  # 401/403 from the provider
    RATE_LIMIT = "rate_limit"  # 429 from the provider
    BAD_REQUEST = "bad_request"  # 400/404/422 from the provider

    # Catch-all
    UNEXPECTED_ERROR = "unexpected_error"


class FailureCode(str, Enum):
    """Codes carried by failures that cross into the caller-visible surface."""

    NO_PROVIDER_AVAILABLE = "NO_PROVIDER_AVAILABLE"
    ALL_PROVIDERS_FAILED = "ALL_PROVIDERS_FAILED"

    # Provider-level codes, never returned to callers directly
    PROVIDER_ERROR = "PROVIDER_ERROR"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"


def classify_status(status_code: int | None) -> ErrorType:
    """Map an upstream HTTP status code to an ErrorType."""
    if status_code is None:
        return ErrorType.TRANSPORT_ERROR
    if status_code in (401, 403):
        return ErrorType.AUTH_ERROR
    if status_code == 429:
        return ErrorType.RATE_LIMIT
    if status_code in (400, 404, 422):
        return ErrorType.BAD_REQUEST
    if 200 <= status_code < 300:
        return ErrorType.MALFORMED_RESPONSE
    return ErrorType.UPSTREAM_HTTP_ERROR
