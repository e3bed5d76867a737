"""In-memory per-provider request accounting.

Counts are process-local and reset on restart. The daily window rolls over
lazily: the first read or write after local midnight zeroes the counter.
"""

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta

from ai_router.core.exceptions import QuotaExceededError
from ai_router.core.models import ProviderUsage
from ai_router.core.provider_config import ProviderDescriptor

logger = logging.getLogger(__name__)

MINUTE_WINDOW = timedelta(seconds=60)


class UsageCounter:
    """Request counter for a single provider.

    Attributes:
        requests_today: Requests recorded since window_start
        window_start: Calendar day the counter belongs to
        recent: Timestamps of requests inside the last minute
    """

    def __init__(self, today: date) -> None:
        self.requests_today = 0
        self.window_start = today
        self.recent: deque[datetime] = deque()
        self.lock = threading.Lock()

    def roll(self, now: datetime) -> None:
        """Reset the daily count on a new day and drop expired minute entries.

        Caller must hold ``lock``.
        """
        today = now.date()
        if today != self.window_start:
            self.requests_today = 0
            self.window_start = today
        cutoff = now - MINUTE_WINDOW
        while self.recent and self.recent[0] <= cutoff:
            self.recent.popleft()


class QuotaTracker:
    """Tracks daily and per-minute usage for every registered provider."""

    def __init__(
        self,
        providers: Iterable[ProviderDescriptor],
        clock: Callable[[], datetime] = datetime.now,
        enforce_minute_limit: bool = True,
    ) -> None:
        self._clock = clock
        self._enforce_minute_limit = enforce_minute_limit
        self._providers = {p.id: p for p in providers}
        today = clock().date()
        self._counters = {provider_id: UsageCounter(today) for provider_id in self._providers}

    @property
    def enforce_minute_limit(self) -> bool:
        return self._enforce_minute_limit

    def _counter(self, provider_id: str) -> tuple[ProviderDescriptor, UsageCounter]:
        try:
            return self._providers[provider_id], self._counters[provider_id]
        except KeyError:
            raise KeyError(f"Unknown provider '{provider_id}'") from None

    def remaining(self, provider_id: str) -> int:
        """Requests left today, never negative."""
        provider, counter = self._counter(provider_id)
        with counter.lock:
            counter.roll(self._clock())
            return max(0, provider.rate_limit.requests_per_day - counter.requests_today)

    def minute_remaining(self, provider_id: str) -> int:
        """Requests left in the sliding 60 second window."""
        provider, counter = self._counter(provider_id)
        with counter.lock:
            counter.roll(self._clock())
            return max(0, provider.rate_limit.requests_per_minute - len(counter.recent))

    def has_capacity(self, provider_id: str) -> bool:
        """Check daily capacity, and minute capacity when enforced."""
        if self.remaining(provider_id) <= 0:
            return False
        return not self._enforce_minute_limit or self.minute_remaining(provider_id) > 0

    def record(self, provider_id: str) -> None:
        """Count one attempted call against the provider."""
        _, counter = self._counter(provider_id)
        with counter.lock:
            now = self._clock()
            counter.roll(now)
            counter.requests_today += 1
            counter.recent.append(now)

    def reserve(self, provider_id: str) -> None:
        """Atomically check capacity and record one call.

        Raises:
            QuotaExceededError: If the daily or (when enforced) minute budget is spent.
        """
        provider, counter = self._counter(provider_id)
        with counter.lock:
            now = self._clock()
            counter.roll(now)
            if counter.requests_today >= provider.rate_limit.requests_per_day:
                logger.warning(f"Daily quota exhausted for provider '{provider_id}'")
                raise QuotaExceededError(provider_id, window="day")
            if (
                self._enforce_minute_limit
                and len(counter.recent) >= provider.rate_limit.requests_per_minute
            ):
                logger.debug(f"Minute limit reached for provider '{provider_id}'")
                raise QuotaExceededError(provider_id, window="minute")
            counter.requests_today += 1
            counter.recent.append(now)

    def usage(self, provider_id: str) -> ProviderUsage:
        provider, counter = self._counter(provider_id)
        with counter.lock:
            counter.roll(self._clock())
            return ProviderUsage(
                provider_id=provider_id,
                requests_today=counter.requests_today,
                requests_per_day=provider.rate_limit.requests_per_day,
                requests_last_minute=len(counter.recent),
                requests_per_minute=provider.rate_limit.requests_per_minute,
            )

    def snapshot(self) -> dict[str, ProviderUsage]:
        """Usage for every provider, keyed by id."""
        return {provider_id: self.usage(provider_id) for provider_id in self._providers}
