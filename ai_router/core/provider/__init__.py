"""Provider management package.

Focused, single-responsibility components the routing engine is built from:

- ProviderRegistry: Stores provider descriptors and resolves credentials
- ProviderConfigLoader: Builds descriptors from the catalog, TOML and environment
- QuotaTracker: Counts daily and per-minute usage per provider
- AvailabilityFilter: Decides which providers are usable right now
- SelectionStrategy: Ranks providers and builds fallback chains
- ApiKeyRotator: Round-robin rotation over multi-key credentials
- ClientFactory: Creates and caches HTTP clients per provider
"""

from ai_router.core.provider.api_key_rotator import ApiKeyRotator
from ai_router.core.provider.availability import AvailabilityFilter
from ai_router.core.provider.client_factory import ClientFactory
from ai_router.core.provider.provider_config_loader import (
    ProviderConfigLoader,
    ProviderLoadResult,
)
from ai_router.core.provider.provider_registry import ProviderRegistry
from ai_router.core.provider.quota_tracker import QuotaTracker
from ai_router.core.provider.selector import SelectionStrategy

__all__ = [
    "ApiKeyRotator",
    "AvailabilityFilter",
    "ClientFactory",
    "ProviderConfigLoader",
    "ProviderLoadResult",
    "ProviderRegistry",
    "QuotaTracker",
    "SelectionStrategy",
]
