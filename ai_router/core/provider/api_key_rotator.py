"""Round-robin rotation over a provider's credentials."""

import asyncio


class ApiKeyRotator:
    """Round-robin API key rotation per provider.

    Each provider gets its own asyncio.Lock, so concurrent requests against
    the same provider spread across its keys without two tasks reading the
    same index.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._indices: dict[str, int] = {}

    async def get_next_key(self, provider_id: str, api_keys: list[str]) -> str:
        """Get the next API key using round-robin rotation.

        Args:
            provider_id: The provider the keys belong to.
            api_keys: Keys currently configured for this provider.

        Returns:
            The next API key in the rotation.

        Raises:
            ValueError: If api_keys is empty.
        """
        if not api_keys:
            raise ValueError(f"No API keys available for provider '{provider_id}'")

        lock = self._locks.setdefault(provider_id, asyncio.Lock())
        async with lock:
            idx = self._indices.get(provider_id, 0) % len(api_keys)
            self._indices[provider_id] = (idx + 1) % len(api_keys)
            return api_keys[idx]

    def reset_rotation(self, provider_id: str) -> None:
        self._indices.pop(provider_id, None)
