"""Error responses for the routing endpoints.

Every error leaves the API in one envelope:
{
    "type": "error",
    "error": {"type": "<error_type>", "message": "<error_message>", ...}
}
"""

import logging
from dataclasses import dataclass
from typing import Any

from fastapi.responses import JSONResponse

from ai_router.core.exceptions import RouterError

logger = logging.getLogger(__name__)


def _envelope(error_type: str, message: str, **extra: Any) -> dict[str, Any]:
    error: dict[str, Any] = {"type": error_type, "message": message}
    error.update({k: v for k, v in extra.items() if v is not None})
    return {"type": "error", "error": error}


@dataclass(frozen=True, slots=True)
class ErrorResponseBuilder:
    """Centralized builder for consistent error responses across all endpoints."""

    @staticmethod
    def routing_failure(error: RouterError) -> JSONResponse:
        """Build a 503 response from a routing failure.

        Both "no provider available" and "all providers failed" mean the
        service cannot answer right now, so both map to 503.
        """
        payload = error.to_dict()
        logger.warning(f"Routing failed [{payload['code']}]: {error.message}")
        return JSONResponse(
            status_code=503,
            content=_envelope(
                "service_unavailable",
                error.message,
                code=payload["code"],
                attempts=payload.get("attempts"),
            ),
        )
