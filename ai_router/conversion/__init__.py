from ai_router.conversion.base import ParsedCompletion, WireFormat
from ai_router.conversion.factory import get_wire_format

__all__ = ["ParsedCompletion", "WireFormat", "get_wire_format"]
