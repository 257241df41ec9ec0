"""Base weather provider abstraction.

This module defines the interface for current-weather providers. Providers
relay the upstream JSON unchanged; the API does not translate it into a
canonical format.

## Error Handling

- Upstream HTTP errors raise `ProviderError` carrying the upstream status
  and message, which the API relays to the client
- Transport failures (timeouts, connection errors) raise `ProviderError`
  with status 500
- Nothing is retried and nothing is cached
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from city_weather import __version__
from city_weather.errors import UpstreamError
from city_weather.models.weather import WeatherQuery

logger = logging.getLogger(__name__)


class ProviderError(UpstreamError):
    """Weather provider request failed."""

    def __init__(
        self,
        message: str | None,
        provider: str,
        status_code: int | None = None,
    ):
        super().__init__(message, status_code=status_code)
        self.provider = provider


class WeatherProvider(ABC):
    """Abstract base class for current-weather providers.

    Attributes:
        name: Human-readable provider name
        base_url: Endpoint URL
        requires_api_key: Whether this provider requires an API key

    Example:
        ```python
        class MyProvider(WeatherProvider):
            name = "my_provider"
            base_url = "https://api.example.com/current"

            async def get_current_weather(self, query):
                response = await self._fetch(self.base_url, params=query.to_params())
                return response.json()
        ```
    """

    name: str
    base_url: str
    requires_api_key: bool = False

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the provider.

        Args:
            api_key: API key if required by the provider
            timeout: Request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        if self.requires_api_key and not api_key:
            raise ValueError(f"{self.name} requires an API key")

        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> WeatherProvider:
        """Enter async context manager."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "User-Agent": f"city-weather/{__version__}",
            "Accept": "application/json",
        }

    @staticmethod
    def _error_message(response: httpx.Response) -> str | None:
        """Pull the upstream error message out of a JSON error body."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return None

    async def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Fetch data from the API.

        Args:
            url: Full URL to fetch
            params: Query parameters
            headers: Additional headers

        Returns:
            HTTP response

        Raises:
            ProviderError: If the request fails or the API returns an error
        """
        client = self._get_client()
        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        try:
            response = await client.get(url, params=params, headers=request_headers)
        except httpx.HTTPError as e:
            logger.error(f"{self.name} request failed: {e!r}")
            raise ProviderError(None, provider=self.name) from e

        if response.status_code >= 400:
            logger.error(
                f"{self.name} API error {response.status_code}: {response.text[:200]}"
            )
            raise ProviderError(
                self._error_message(response),
                provider=self.name,
                status_code=response.status_code,
            )

        return response

    @abstractmethod
    async def get_current_weather(self, query: WeatherQuery) -> dict[str, Any]:
        """Get current weather for a city or coordinates.

        Args:
            query: Validated city or coordinate query

        Returns:
            Provider JSON response

        Raises:
            ProviderError: If the weather cannot be retrieved
        """
