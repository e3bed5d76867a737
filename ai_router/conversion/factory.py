from ai_router.conversion.anthropic_format import AnthropicWireFormat
from ai_router.conversion.base import WireFormat
from ai_router.conversion.cohere_format import CohereWireFormat
from ai_router.conversion.openai_format import OpenAIWireFormat

_WIRE_FORMATS: dict[str, WireFormat] = {
    "openai": OpenAIWireFormat(),
    "anthropic": AnthropicWireFormat(),
    "cohere": CohereWireFormat(),
}


def get_wire_format(api_format: str) -> WireFormat:
    """Return the shared WireFormat instance for an api_format name.

    Raises:
        ValueError: If the format is not supported.
    """
    try:
        return _WIRE_FORMATS[api_format]
    except KeyError:
        raise ValueError(
            f"Unsupported API format '{api_format}'. "
            f"Must be one of: {', '.join(sorted(_WIRE_FORMATS))}"
        ) from None
