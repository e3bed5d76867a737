"""Provider catalog loading from the built-in defaults, a TOML file and the environment."""

import dataclasses
import hashlib
import logging
import os
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ai_router.core.capabilities import Capability
from ai_router.core.provider.catalog import DEFAULT_PROVIDERS
from ai_router.core.provider_config import Pricing, ProviderDescriptor, RateLimit


@dataclass
class ProviderLoadResult:
    """Result of loading a provider configuration."""

    name: str
    status: str  # "success", "missing"
    message: str | None = None
    api_key_hash: str | None = None
    base_url: str | None = None


class ProviderConfigLoader:
    """Builds provider descriptors from the catalog, TOML overrides and environment.

    Responsibilities:
    - Start from the built-in catalog
    - Apply ``[providers.<id>]`` tables from an optional TOML file
    - Apply ``{ID}_BASE_URL`` and ``{ID}_CUSTOM_HEADER_*`` environment overrides
    - Report per-provider credential status without exposing keys

    Precedence for every field is env > TOML > built-in default.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        config_file: str | Path | None = None,
        defaults: Iterable[ProviderDescriptor] = DEFAULT_PROVIDERS,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._environ = os.environ if environ is None else environ
        self._config_file = Path(config_file) if config_file else None
        self._defaults = tuple(defaults)

    def get_custom_headers(self, provider_prefix: str) -> dict[str, str]:
        """Extract provider-specific custom headers from environment.

        Args:
            provider_prefix: The uppercase provider prefix (e.g., "OPENAI").

        Returns:
            Dictionary of header names to values.
        """
        custom_headers = {}
        prefix = f"{provider_prefix.upper()}_CUSTOM_HEADER_"

        for env_key, env_value in self._environ.items():
            if env_key.startswith(prefix):
                header_name = env_key[len(prefix) :]
                if header_name:
                    # Convert underscores to hyphens for HTTP header format
                    custom_headers[header_name.replace("_", "-")] = env_value

        return custom_headers

    def load_toml_config(self) -> dict[str, dict[str, Any]]:
        """Load the ``providers`` tables from the configured TOML file.

        Returns:
            Mapping of provider id to its raw TOML table; empty if no file is set.

        Raises:
            ValueError: If the file cannot be read or is not valid TOML.
        """
        if self._config_file is None:
            return {}

        try:
            data = tomllib.loads(self._config_file.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ValueError(f"Cannot load provider config '{self._config_file}': {e}") from e

        providers = data.get("providers", {})
        if not isinstance(providers, dict):
            raise ValueError(f"'providers' in '{self._config_file}' must be a table")

        self._logger.debug(f"Loaded {len(providers)} provider table(s) from {self._config_file}")
        return {str(name).lower(): table for name, table in providers.items()}

    def load_providers(self) -> list[ProviderDescriptor]:
        """Build the final provider list.

        Returns:
            One descriptor per built-in or TOML-declared provider.

        Raises:
            ValueError: If a TOML table is incomplete or invalid.
        """
        toml_config = self.load_toml_config()
        descriptors: list[ProviderDescriptor] = []
        known: set[str] = set()

        for default in self._defaults:
            known.add(default.id)
            merged = self._apply_toml(default, toml_config.get(default.id, {}))
            descriptors.append(self._apply_env(merged))

        for provider_id, table in toml_config.items():
            if provider_id in known:
                continue
            descriptors.append(self._apply_env(self._from_toml(provider_id, table)))
            self._logger.info(f"Registered custom provider '{provider_id}' from TOML config")

        return descriptors

    def load_provider_results(
        self, descriptors: Iterable[ProviderDescriptor]
    ) -> list[ProviderLoadResult]:
        """Report credential status for each provider.

        Args:
            descriptors: Providers to inspect.

        Returns:
            One ProviderLoadResult per provider, in the given order.
        """
        results = []
        for descriptor in descriptors:
            keys = self._environ.get(descriptor.api_key_env, "").split()
            if not keys:
                results.append(
                    ProviderLoadResult(
                        name=descriptor.id,
                        status="missing",
                        message=f"Missing {descriptor.api_key_env}",
                        base_url=descriptor.base_url,
                    )
                )
                continue
            results.append(
                ProviderLoadResult(
                    name=descriptor.id,
                    status="success",
                    api_key_hash=self._get_api_key_hash(keys[0]),
                    base_url=descriptor.base_url,
                )
            )
        return results

    def _apply_env(self, descriptor: ProviderDescriptor) -> ProviderDescriptor:
        provider_upper = descriptor.id.upper().replace("-", "_")
        changes: dict[str, Any] = {}

        base_url = self._environ.get(f"{provider_upper}_BASE_URL")
        if base_url:
            changes["base_url"] = base_url

        env_headers = self.get_custom_headers(provider_upper)
        if env_headers:
            changes["custom_headers"] = {**descriptor.custom_headers, **env_headers}

        if not changes:
            return descriptor
        try:
            return dataclasses.replace(descriptor, **changes)
        except ValueError as e:
            raise ValueError(
                f"Invalid environment override for provider '{descriptor.id}': {e}"
            ) from e

    def _apply_toml(
        self, descriptor: ProviderDescriptor, table: dict[str, Any]
    ) -> ProviderDescriptor:
        if not table:
            return descriptor

        try:
            return dataclasses.replace(
                descriptor,
                name=table.get("name", descriptor.name),
                base_url=table.get("base-url", descriptor.base_url),
                api_key_env=table.get("api-key-env", descriptor.api_key_env),
                models=tuple(table.get("models", descriptor.models)),
                priority=int(table.get("priority", descriptor.priority)),
                rate_limit=RateLimit(
                    requests_per_minute=int(
                        table.get(
                            "requests-per-minute", descriptor.rate_limit.requests_per_minute
                        )
                    ),
                    requests_per_day=int(
                        table.get("requests-per-day", descriptor.rate_limit.requests_per_day)
                    ),
                ),
                capabilities=(
                    self._parse_capabilities(table["capabilities"])
                    if "capabilities" in table
                    else descriptor.capabilities
                ),
                pricing=Pricing(
                    cost_per_1k_tokens=float(
                        table.get("cost-per-1k-tokens", descriptor.pricing.cost_per_1k_tokens)
                    ),
                    currency=table.get("currency", descriptor.pricing.currency),
                ),
                api_format=table.get("api-format", descriptor.api_format),
                custom_headers={
                    **descriptor.custom_headers,
                    **table.get("custom-headers", {}),
                },
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid TOML config for provider '{descriptor.id}': {e}") from e

    def _from_toml(self, provider_id: str, table: dict[str, Any]) -> ProviderDescriptor:
        required = ["base-url", "models", "priority", "cost-per-1k-tokens"]
        missing = [k for k in required if k not in table]
        if missing:
            raise ValueError(
                f"Custom provider '{provider_id}' is missing fields: {', '.join(missing)}"
            )

        try:
            return ProviderDescriptor(
                id=provider_id,
                name=table.get("name", provider_id),
                base_url=table["base-url"],
                api_key_env=table.get(
                    "api-key-env", f"{provider_id.upper().replace('-', '_')}_API_KEY"
                ),
                models=tuple(table["models"]),
                priority=int(table["priority"]),
                rate_limit=RateLimit(
                    requests_per_minute=int(table.get("requests-per-minute", 60)),
                    requests_per_day=int(table.get("requests-per-day", 1000)),
                ),
                capabilities=self._parse_capabilities(table.get("capabilities", ["chat"])),
                pricing=Pricing(
                    cost_per_1k_tokens=float(table["cost-per-1k-tokens"]),
                    currency=table.get("currency", "USD"),
                ),
                api_format=table.get("api-format", "openai"),
                custom_headers=dict(table.get("custom-headers", {})),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid TOML config for provider '{provider_id}': {e}") from e

    @staticmethod
    def _parse_capabilities(values: Iterable[str]) -> frozenset[Capability]:
        return frozenset(Capability.parse(v) for v in values)

    @staticmethod
    def _get_api_key_hash(api_key: str) -> str:
        """Return first 8 chars of sha256 hash."""
        return hashlib.sha256(api_key.encode()).hexdigest()[:8]
