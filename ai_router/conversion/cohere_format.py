from typing import Any

from ai_router.conversion.base import ParsedCompletion, WireFormat, token_count
from ai_router.core.models import ROLE_ASSISTANT, ROLE_SYSTEM, ROLE_USER, RequestSpec

# Cohere v1 chat uses its own role names
_COHERE_ROLES = {ROLE_USER: "USER", ROLE_ASSISTANT: "CHATBOT", ROLE_SYSTEM: "SYSTEM"}


class CohereWireFormat(WireFormat):
    """Cohere v1 chat shape.

    The final user turn goes in ``message``, earlier turns in
    ``chat_history`` and the system prompt in ``preamble``.
    """

    endpoint_path = "/chat"

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
        turns = [dict(m) for m in spec.messages]

        last_user = None
        for idx in range(len(turns) - 1, -1, -1):
            if turns[idx].get("role") == ROLE_USER:
                last_user = idx
                break

        if last_user is None:
            message = ""
            history = turns
        else:
            message = turns[last_user].get("content", "")
            history = turns[:last_user] + turns[last_user + 1 :]

        payload: dict[str, Any] = {
            "model": model,
            "message": message,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if history:
            payload["chat_history"] = [
                {
                    "role": _COHERE_ROLES.get(turn.get("role", ROLE_USER), "USER"),
                    "message": turn.get("content", ""),
                }
                for turn in history
            ]
        if spec.system_prompt and spec.system_prompt.strip():
            payload["preamble"] = spec.system_prompt.strip()
        return payload

    def parse_response(self, data: Any) -> ParsedCompletion:
        if not isinstance(data, dict):
            raise ValueError("Response body is not a JSON object")

        text = data.get("text")
        if not isinstance(text, str):
            raise ValueError("Response has no text")

        meta = data.get("meta") or {}
        billed = meta.get("billed_units") if isinstance(meta, dict) else None
        if not isinstance(billed, dict):
            billed = {}

        return ParsedCompletion(
            content=text,
            prompt_tokens=token_count(billed.get("input_tokens")),
            completion_tokens=token_count(billed.get("output_tokens")),
            finish_reason=data.get("finish_reason") or "unknown",
            response_id=data.get("generation_id") or data.get("response_id"),
        )
