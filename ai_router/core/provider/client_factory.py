"""Client factory for creating and caching HTTP clients per provider."""

import httpx

from ai_router.core.provider_config import ProviderDescriptor


class ClientFactory:
    """Creates and caches one ``httpx.AsyncClient`` per provider.

    Clients are cached to reuse connection pools across requests. Timeouts
    are applied per request by the caller, not on the client.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize a new client factory.

        Args:
            transport: Optional transport shared by every client, for tests.
        """
        self._clients: dict[str, httpx.AsyncClient] = {}
        self._transport = transport

    def get_or_create_client(self, provider: ProviderDescriptor) -> httpx.AsyncClient:
        """Get cached client or create a new one for the provider."""
        client = self._clients.get(provider.id)
        if client is None or client.is_closed:
            client = httpx.AsyncClient(transport=self._transport)
            self._clients[provider.id] = client
        return client

    async def aclose(self) -> None:
        """Close every cached client and forget it."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.aclose()
