"""Availability filtering over the provider registry."""

from ai_router.core.provider.provider_registry import ProviderRegistry
from ai_router.core.provider.quota_tracker import QuotaTracker
from ai_router.core.provider_config import ProviderDescriptor


class AvailabilityFilter:
    """Answers which registered providers can take a request right now.

    A provider is *available* when its credential is set, and *usable*
    when it is available and still has quota left. Both checks are reads
    only; nothing here records usage.
    """

    def __init__(self, registry: ProviderRegistry, tracker: QuotaTracker) -> None:
        self._registry = registry
        self._tracker = tracker

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def tracker(self) -> QuotaTracker:
        return self._tracker

    def available_providers(self) -> tuple[ProviderDescriptor, ...]:
        """Credentialed providers in priority order."""
        return tuple(p for p in self._registry.list_providers() if self._registry.has_credential(p))

    def is_usable(self, provider_id: str) -> bool:
        """Check that the provider is known, credentialed and has capacity."""
        provider = self._registry.get(provider_id)
        if provider is None or not self._registry.has_credential(provider):
            return False
        return self._tracker.has_capacity(provider_id)

    def usable_providers(self) -> tuple[ProviderDescriptor, ...]:
        return tuple(p for p in self.available_providers() if self._tracker.has_capacity(p.id))
