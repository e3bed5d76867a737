from typing import Any

from ai_router.conversion.base import ParsedCompletion, WireFormat, token_count
from ai_router.core.models import RequestSpec


class OpenAIWireFormat(WireFormat):
    """OpenAI Chat Completions shape.

    Also spoken by OpenRouter, Groq and Together.
    """

    endpoint_path = "/chat/completions"

    def build_headers(self, api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(
        self,
        model: str,
        spec: RequestSpec,
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        return {
            "model": model,
            "messages": spec.conversation(),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

    def parse_response(self, data: Any) -> ParsedCompletion:
        if not isinstance(data, dict):
            raise ValueError("Response body is not a JSON object")

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise ValueError("Response has no choices")

        choice = choices[0]
        message = choice.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise ValueError("Response choice has no text content")

        usage = data.get("usage") or {}
        if not isinstance(usage, dict):
            usage = {}

        return ParsedCompletion(
            content=content,
            prompt_tokens=token_count(usage.get("prompt_tokens")),
            completion_tokens=token_count(usage.get("completion_tokens")),
            finish_reason=choice.get("finish_reason") or "unknown",
            response_id=data.get("id"),
            model=data.get("model"),
        )
