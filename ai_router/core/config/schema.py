"""Declarative schema for environment variable configuration.

This module provides a single source of truth for all environment variables,
including automatic type coercion, validation, and documentation generation.

The schema-based approach provides:
- Single definition point for all config options
- Automatic type coercion (str -> int/float/bool)
- Validation with clear error messages
- Self-documenting configuration
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EnvVarSpec:
    """Specification for a single environment variable.

    Attributes:
        name: Environment variable name (e.g., "PORT", "LOG_LEVEL")
        default: Default value if env var not set
        type_hint: Type for validation (int, str, float, bool)
        description: Human-readable description for docs
        validator: Optional custom validation function
        coerce: Optional function to convert string to target type
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    coerce: Callable[[str], Any] | None = None


class ConfigSchema:
    """Registry of all configuration environment variables.

    Each attribute is an EnvVarSpec that defines:
    - The environment variable name
    - Default value
    - Type for validation
    - Human-readable description
    - Optional validation rules
    """

    # === Server Settings ===

    HOST = EnvVarSpec(
        name="HOST",
        default="0.0.0.0",
        type_hint=str,
        description="Server host address to bind to",
    )

    PORT = EnvVarSpec(
        name="PORT",
        default=8082,
        type_hint=int,
        description="Server port number",
        validator=lambda x: 1 <= x <= 65535,
    )

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        validator=lambda x: x.split()[0].upper()
        in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )

    LOG_REQUEST_METRICS = EnvVarSpec(
        name="LOG_REQUEST_METRICS",
        default=True,
        type_hint=bool,
        description="Log one INFO line per routed request with tokens and cost",
    )

    # === Timeout Settings ===

    REQUEST_TIMEOUT = EnvVarSpec(
        name="REQUEST_TIMEOUT",
        default=30.0,
        type_hint=float,
        description="Ceiling in seconds for a single provider call",
        validator=lambda x: x > 0,
    )

    HEALTH_CHECK_TIMEOUT = EnvVarSpec(
        name="HEALTH_CHECK_TIMEOUT",
        default=5.0,
        type_hint=float,
        description="Timeout in seconds for provider health probes",
        validator=lambda x: x > 0,
    )

    # === Routing Settings ===

    MAX_FALLBACK_ATTEMPTS = EnvVarSpec(
        name="MAX_FALLBACK_ATTEMPTS",
        default=2,
        type_hint=int,
        description="Fallback providers tried after the primary fails",
        validator=lambda x: x >= 0,
    )

    SPEED_PREFERRED_PROVIDER = EnvVarSpec(
        name="SPEED_PREFERRED_PROVIDER",
        default="groq",
        type_hint=str,
        description="Provider promoted to the front when optimizing for speed",
    )

    ENFORCE_MINUTE_LIMIT = EnvVarSpec(
        name="ENFORCE_MINUTE_LIMIT",
        default=True,
        type_hint=bool,
        description="Enforce requests_per_minute with a sliding 60 second window",
    )

    DEFAULT_TEMPERATURE = EnvVarSpec(
        name="DEFAULT_TEMPERATURE",
        default=0.7,
        type_hint=float,
        description="Sampling temperature used when a request omits it",
        validator=lambda x: 0 <= x <= 2,
    )

    DEFAULT_MAX_TOKENS = EnvVarSpec(
        name="DEFAULT_MAX_TOKENS",
        default=1000,
        type_hint=int,
        description="Completion token limit used when a request omits it",
        validator=lambda x: x > 0,
    )

    # === Provider Catalog ===

    PROVIDERS_CONFIG_FILE = EnvVarSpec(
        name="PROVIDERS_CONFIG_FILE",
        default=None,
        type_hint=str,
        description="Optional TOML file overriding or extending the built-in provider catalog",
    )

    # === Outbound Attribution Headers ===

    APP_REFERER = EnvVarSpec(
        name="APP_REFERER",
        default="http://localhost:3000",
        type_hint=str,
        description="Value sent as HTTP-Referer to providers",
    )

    APP_TITLE = EnvVarSpec(
        name="APP_TITLE",
        default="AI Router",
        type_hint=str,
        description="Value sent as X-Title to providers",
    )

    @classmethod
    def all_specs(cls) -> dict[str, EnvVarSpec]:
        """Get all environment variable specifications.

        Returns:
            Dictionary mapping spec names to EnvVarSpec objects
        """
        return {
            name: getattr(cls, name)
            for name in dir(cls)
            if isinstance(getattr(cls, name), EnvVarSpec)
        }

    @classmethod
    def generate_markdown_docs(cls) -> str:
        """Generate Markdown documentation for all environment variables."""
        lines = ["# Configuration Options\n\n", "## Environment Variables\n\n"]

        for _name, spec in sorted(cls.all_specs().items()):
            default_repr = f"`{spec.default}`" if spec.default is not None else "None"
            lines.extend(
                [
                    f"### `{spec.name}`\n\n",
                    f"- **Type**: `{spec.type_hint.__name__}`\n",
                    f"- **Default**: {default_repr}\n",
                    f"- **Description**: {spec.description}\n\n",
                ]
            )

        return "\n".join(lines)
