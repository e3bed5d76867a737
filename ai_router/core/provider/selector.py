"""Provider ranking and fallback chain construction."""

import logging

from ai_router.core.capabilities import Capability, OptimizationGoal
from ai_router.core.provider.availability import AvailabilityFilter
from ai_router.core.provider_config import ProviderDescriptor


class SelectionStrategy:
    """Ranks usable providers for a request.

    Responsibilities:
    - Pick the best provider for a capability and optimization goal
    - Honor an explicit provider choice without substitution
    - Build the priority-ordered fallback chain

    Ordering by goal:
    - cost: ascending price per 1K tokens, ties broken by priority
    - speed: the preferred low-latency provider first, then priority
    - quality or none: priority
    """

    def __init__(self, availability: AvailabilityFilter, speed_preferred: str = "groq") -> None:
        """Initialize the selection strategy.

        Args:
            availability: Filter answering which providers are usable.
            speed_preferred: Provider id promoted to the front for the speed goal.
        """
        self._availability = availability
        self._speed_preferred = speed_preferred

    def select_best(
        self,
        capability: Capability,
        goal: OptimizationGoal | None = None,
        max_cost_per_1k: float | None = None,
    ) -> ProviderDescriptor | None:
        """Pick the head of the ranked candidate list.

        Returns:
            The best usable provider, or None if nothing qualifies.
        """
        logger = logging.getLogger(__name__)

        candidates = [p for p in self._availability.usable_providers() if p.supports(capability)]
        if max_cost_per_1k is not None:
            candidates = [p for p in candidates if p.pricing.cost_per_1k_tokens <= max_cost_per_1k]

        if not candidates:
            logger.debug(
                f"No usable provider for capability '{capability.value}' "
                f"(goal={goal.value if goal else None}, max_cost={max_cost_per_1k})"
            )
            return None

        ranked = self._rank(candidates, goal)
        logger.debug(
            f"Ranked providers for {capability.value}/{goal.value if goal else 'default'}: "
            f"{[p.id for p in ranked]}"
        )
        return ranked[0]

    def select_explicit(self, provider_id: str) -> ProviderDescriptor | None:
        """Return the named provider only if it is usable."""
        if not self._availability.is_usable(provider_id):
            return None
        return self._availability.registry.get(provider_id)

    def build_fallback_chain(self, capability: Capability) -> list[ProviderDescriptor]:
        """Credentialed providers offering the capability, in priority order.

        The caller decides how many of them to try.
        """
        return [p for p in self._availability.available_providers() if p.supports(capability)]

    def _rank(
        self, candidates: list[ProviderDescriptor], goal: OptimizationGoal | None
    ) -> list[ProviderDescriptor]:
        by_priority = sorted(candidates, key=lambda p: (p.priority, p.id))

        if goal == OptimizationGoal.COST:
            return sorted(
                by_priority, key=lambda p: (p.pricing.cost_per_1k_tokens, p.priority, p.id)
            )

        if goal == OptimizationGoal.SPEED:
            preferred = [p for p in by_priority if p.id == self._speed_preferred]
            return preferred + [p for p in by_priority if p.id != self._speed_preferred]

        return by_priority
