from typing import Any

from ai_router.conversion.base import ParsedCompletion, WireFormat, token_count
from ai_router.core.models import ROLE_SYSTEM, RequestSpec

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicWireFormat(WireFormat):
    """Anthropic Messages API shape.

    System text travels in the top-level ``system`` field rather than as a
    message, and the reply is a list of content blocks.
    """

    endpoint_path = "/messages"

    def build_headers(self, api_key: str) -> dict[str, str]:
        return {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }

    def build_payload(
        self,
        model: str,
        spec: RequestSpec,
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        system_parts: list[str] = []
        messages: list[dict[str, str]] = []

        for msg in spec.conversation():
            if msg.get("role") == ROLE_SYSTEM:
                system_parts.append(msg.get("content", ""))
            else:
                messages.append({"role": msg["role"], "content": msg.get("content", "")})

        payload: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if system_parts:
            payload["system"] = "\n\n".join(system_parts)
        return payload

    def parse_response(self, data: Any) -> ParsedCompletion:
        if not isinstance(data, dict):
            raise ValueError("Response body is not a JSON object")

        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise ValueError("Response has no content blocks")

        texts = [
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        if not texts:
            raise ValueError("Response has no text block")

        usage = data.get("usage") or {}
        if not isinstance(usage, dict):
            usage = {}

        return ParsedCompletion(
            content="".join(texts),
            prompt_tokens=token_count(usage.get("input_tokens")),
            completion_tokens=token_count(usage.get("output_tokens")),
            finish_reason=data.get("stop_reason") or "unknown",
            response_id=data.get("id"),
            model=data.get("model"),
        )
