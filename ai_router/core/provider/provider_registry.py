"""Provider registry for storing and querying provider descriptors."""

import os
from collections.abc import Iterable, Mapping

from ai_router.core.provider_config import ProviderDescriptor


class ProviderRegistry:
    """Central registry for provider descriptors.

    Responsibilities:
    - Store and retrieve provider descriptors
    - List providers in priority order
    - Resolve credentials from the environment

    Descriptors never hold secrets. Credentials are looked up in the
    environment mapping on every call, so rotating a key in the mapping
    takes effect immediately.
    """

    def __init__(
        self,
        descriptors: Iterable[ProviderDescriptor] = (),
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            descriptors: Providers to register.
            environ: Mapping to resolve credentials from (defaults to os.environ).
        """
        self._configs: dict[str, ProviderDescriptor] = {}
        self._environ = os.environ if environ is None else environ
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ProviderDescriptor) -> None:
        """Register a provider descriptor.

        Raises:
            ValueError: If a provider with the same id is already registered.
        """
        if descriptor.id in self._configs:
            raise ValueError(f"Provider '{descriptor.id}' is already registered")
        self._configs[descriptor.id] = descriptor

    def get(self, provider_id: str) -> ProviderDescriptor | None:
        """Get provider descriptor by id, None if unknown."""
        return self._configs.get(provider_id)

    def list_providers(self) -> tuple[ProviderDescriptor, ...]:
        """Return all providers sorted by priority, ties broken by id."""
        return tuple(sorted(self._configs.values(), key=lambda p: (p.priority, p.id)))

    def exists(self, provider_id: str) -> bool:
        return provider_id in self._configs

    def credentials(self, provider: ProviderDescriptor) -> list[str]:
        """Return the provider's API keys.

        Multiple keys may be given whitespace-separated in the credential
        environment variable.
        """
        return self._environ.get(provider.api_key_env, "").split()

    def has_credential(self, provider: ProviderDescriptor) -> bool:
        """Check that the provider's credential variable is set and non-blank."""
        return bool(self.credentials(provider))
