from ai_router.core.config.schema import ConfigSchema, EnvVarSpec
from ai_router.core.config.settings import RouterConfig, RouterSettings
from ai_router.core.config.validation import (
    ConfigError,
    InvalidSettingsError,
    load_env_var,
    load_settings_values,
)

__all__ = [
    "ConfigError",
    "ConfigSchema",
    "EnvVarSpec",
    "InvalidSettingsError",
    "RouterConfig",
    "RouterSettings",
    "load_env_var",
    "load_settings_values",
]
