"""Coercion and validation of router settings read from the environment.

Every ConfigSchema entry is read and checked before the router starts, so
an operator sees all broken variables at once instead of fixing them one
restart at a time.
"""

import os
from collections.abc import Mapping
from typing import Any

from ai_router.core.config.schema import EnvVarSpec

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


class ConfigError(Exception):
    """A single environment variable failed coercion or validation.

    Attributes:
        env_var: The environment variable name
        value: The raw value that failed validation
        message: Human-readable error message
    """

    def __init__(self, env_var: str, value: str, message: str) -> None:
        self.env_var = env_var
        self.value = value
        self.message = message
        super().__init__(f"{env_var}={value}: {message}")


class InvalidSettingsError(Exception):
    """One or more router settings are invalid.

    Attributes:
        errors: Every ConfigError found, in schema order
    """

    def __init__(self, errors: list[ConfigError]) -> None:
        self.errors = errors
        lines = "\n".join(f"  {error}" for error in errors)
        super().__init__(f"{len(errors)} invalid setting(s):\n{lines}")


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"expected one of {', '.join(sorted(_TRUE_VALUES | _FALSE_VALUES))}")


def coerce_value(spec: EnvVarSpec, raw_value: str) -> Any:
    """Convert a raw string to the spec's type and run its validator.

    Raises:
        ConfigError: If conversion or validation fails
    """
    try:
        if spec.coerce is not None:
            value = spec.coerce(raw_value)
        elif spec.type_hint is bool:
            value = _parse_bool(raw_value)
        elif spec.type_hint is int:
            value = int(raw_value)
        elif spec.type_hint is float:
            value = float(raw_value)
        else:
            value = raw_value
    except (ValueError, TypeError) as e:
        raise ConfigError(
            spec.name,
            raw_value,
            f"Cannot convert to {spec.type_hint.__name__}: {e}",
        ) from e

    if spec.validator is None:
        return value
    try:
        valid = spec.validator(value)
    except (TypeError, IndexError) as e:
        raise ConfigError(spec.name, raw_value, f"Validation error: {e}") from e
    if not valid:
        raise ConfigError(
            spec.name,
            raw_value,
            f"Validation failed for type {spec.type_hint.__name__}",
        )
    return value


def load_env_var(spec: EnvVarSpec, environ: Mapping[str, str] | None = None) -> Any:
    """Load and validate a single environment variable.

    Unset and blank values fall back to the spec default.

    Raises:
        ConfigError: If validation fails or type conversion is impossible
    """
    env = os.environ if environ is None else environ
    raw_value = env.get(spec.name)
    if raw_value is None or not raw_value.strip():
        return spec.default
    return coerce_value(spec, raw_value)


def load_settings_values(
    specs: Mapping[str, EnvVarSpec], environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Load every spec, collecting failures instead of stopping at the first.

    Args:
        specs: Spec name to EnvVarSpec, as returned by ConfigSchema.all_specs()
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Spec name to coerced value

    Raises:
        InvalidSettingsError: If any variable is invalid
    """
    values: dict[str, Any] = {}
    errors: list[ConfigError] = []
    for name, spec in specs.items():
        try:
            values[name] = load_env_var(spec, environ)
        except ConfigError as e:
            errors.append(e)
    if errors:
        raise InvalidSettingsError(errors)
    return values
