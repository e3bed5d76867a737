"""Capability and optimization goal enumerations."""

from enum import Enum


class Capability(str, Enum):
    """Features a provider can declare support for."""

    CHAT = "chat"
    CODE_GENERATION = "code_generation"
    IMAGE_GENERATION = "image_generation"
    EMBEDDINGS = "embeddings"

    @classmethod
    def parse(cls, value: "str | Capability") -> "Capability":
        """Parse a capability name.

        Accepts the enum value ("code_generation"), the camelCase spelling used
        by some configuration files ("codeGeneration") or an existing member.

        Raises:
            ValueError: If the name does not match any capability.
        """
        if isinstance(value, Capability):
            return value
        raw = value.strip().replace("-", "_")
        if raw.isupper() or "_" in raw:
            normalized = raw.lower()
        else:
            normalized = "".join(f"_{c.lower()}" if c.isupper() else c for c in raw).lstrip("_")
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown capability '{value}'. Valid capabilities: {valid}") from None


class OptimizationGoal(str, Enum):
    """Ranking goal applied when selecting a provider."""

    COST = "cost"
    SPEED = "speed"
    QUALITY = "quality"
