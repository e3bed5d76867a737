"""Router configuration module.

This module handles all process-level settings:
- Server settings (host, port, log level)
- Timeouts for provider calls and health probes
- Routing behavior (fallback depth, speed preference, minute limit)
- Request defaults and outbound attribution headers

Uses schema-based loading for automatic type coercion and validation.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from ai_router.core.config.schema import ConfigSchema
from ai_router.core.config.validation import load_settings_values


@dataclass(frozen=True)
class RouterConfig:
    """Configuration for the routing engine and its HTTP surface.

    This is a frozen dataclass passed to the engine builder via dependency
    injection; nothing in the engine reads the environment directly.

    Attributes:
        host: Server bind address
        port: Server port
        log_level: Root log level name
        log_request_metrics: Whether to log one metrics line per request
        request_timeout: Ceiling in seconds for a single provider call
        health_check_timeout: Timeout in seconds for health probes
        max_fallback_attempts: Fallback providers tried after the primary
        speed_preferred_provider: Provider promoted for the speed goal
        enforce_minute_limit: Whether requests_per_minute is enforced
        default_temperature: Temperature used when a request omits it
        default_max_tokens: Token limit used when a request omits it
        providers_config_file: Optional TOML catalog override path
        app_referer: HTTP-Referer header value sent to providers
        app_title: X-Title header value sent to providers
    """

    host: str = "0.0.0.0"
    port: int = 8082
    log_level: str = "INFO"
    log_request_metrics: bool = True
    request_timeout: float = 30.0
    health_check_timeout: float = 5.0
    max_fallback_attempts: int = 2
    speed_preferred_provider: str = "groq"
    enforce_minute_limit: bool = True
    default_temperature: float = 0.7
    default_max_tokens: int = 1000
    providers_config_file: str | None = None
    app_referer: str = "http://localhost:3000"
    app_title: str = "AI Router"

    @property
    def effective_log_level(self) -> str:
        """Log level name with any trailing comment stripped."""
        return self.log_level.split()[0].upper()


class RouterSettings:
    """Manages router configuration from environment variables."""

    @staticmethod
    def load(environ: Mapping[str, str] | None = None) -> RouterConfig:
        """Load router configuration using schema-based validation.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            RouterConfig with values from environment or defaults

        Raises:
            InvalidSettingsError: Listing every variable that failed validation
        """
        values = load_settings_values(ConfigSchema.all_specs(), environ)
        return RouterConfig(**{name.lower(): value for name, value in values.items()})
