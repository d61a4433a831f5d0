"""Shared HTTP plumbing for the Grablin API clients."""

from __future__ import annotations

import httpx

from grablin.config import DEFAULT_API_URL


class ApiClient:
    """Base for clients that talk to the Grablin API.

    Subclasses open a fresh ``httpx.AsyncClient`` per call through
    :meth:`_client`; no connection state is shared across runs.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 120,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our timeout and transport."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self.transport,
        )

    def _url(self, path: str, api_url: str | None = None) -> str:
        """Join *path* onto *api_url* (or the client default)."""
        base = (api_url or self.api_url).rstrip("/")
        return f"{base}{path}"
