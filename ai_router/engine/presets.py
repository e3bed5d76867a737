"""Task presets that turn a plain message into a tuned RequestSpec."""

from typing import Any

from ai_router.core.capabilities import Capability, OptimizationGoal
from ai_router.core.models import RequestSpec

CREATIVE_STYLES = ("creative", "professional", "casual", "technical")

LENGTH_INSTRUCTIONS = {
    "short": "Keep response brief and concise.",
    "medium": "Provide a moderately detailed response.",
    "long": "Provide a comprehensive and detailed response.",
}

LENGTH_MAX_TOKENS = {"short": 500, "medium": 1000, "long": 2000}


def code_request(
    message: str,
    language: str | None = None,
    framework: str | None = None,
    **kwargs: Any,
) -> RequestSpec:
    """Code-generation request: expert-programmer system prompt, quality goal."""
    parts = ["You are an expert programmer."]
    if language:
        parts.append(f"Focus on {language} programming.")
    if framework:
        parts.append(f"Use {framework} framework when appropriate.")
    parts.append("Provide clean, well-documented, and production-ready code.")

    kwargs.setdefault("goal", OptimizationGoal.QUALITY)
    return RequestSpec.from_prompt(
        message,
        system_prompt=" ".join(parts),
        capability=Capability.CODE_GENERATION,
        **kwargs,
    )


def creative_request(
    message: str,
    style: str = "creative",
    length: str = "medium",
    **kwargs: Any,
) -> RequestSpec:
    """Creative-writing request.

    Temperature is 0.9 for the "creative" style and 0.7 otherwise; the
    length picks both the instruction and the token limit.

    Raises:
        ValueError: If style or length is not one of the known values.
    """
    if style not in CREATIVE_STYLES:
        raise ValueError(f"Style must be one of: {', '.join(CREATIVE_STYLES)}")
    if length not in LENGTH_INSTRUCTIONS:
        raise ValueError(f"Length must be one of: {', '.join(LENGTH_INSTRUCTIONS)}")

    kwargs.setdefault("goal", OptimizationGoal.QUALITY)
    return RequestSpec.from_prompt(
        message,
        system_prompt=(
            f"You are a creative writing assistant. Write in a {style} style. "
            f"{LENGTH_INSTRUCTIONS[length]}"
        ),
        temperature=0.9 if style == "creative" else 0.7,
        max_tokens=LENGTH_MAX_TOKENS[length],
        capability=Capability.CHAT,
        **kwargs,
    )
