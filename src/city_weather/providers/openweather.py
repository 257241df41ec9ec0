"""OpenWeatherMap current weather provider.

## API Documentation Summary
Source: https://openweathermap.org/current

## Endpoint
- URL: https://api.openweathermap.org/data/2.5/weather
- By city: ?q={city}&appid={key}&units=metric
- By coordinates: ?lat={lat}&lon={lon}&appid={key}&units=metric

## Authentication
- API key passed as the `appid` query parameter

## Error Format
```json
{"cod": "404", "message": "city not found"}
```

## Response Format (abridged)
```json
{
  "coord": {"lon": -0.1278, "lat": 51.5074},
  "weather": [{"id": 800, "main": "Clear", "description": "clear sky"}],
  "main": {"temp": 22.5, "feels_like": 22.8, "humidity": 65},
  "wind": {"speed": 4.1, "deg": 260},
  "name": "London"
}
```
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from city_weather.models.weather import WeatherQuery
from city_weather.providers.base import ProviderError, WeatherProvider

logger = logging.getLogger(__name__)


class OpenWeatherProvider(WeatherProvider):
    """OpenWeatherMap current weather provider.

    Example:
        ```python
        async with OpenWeatherProvider(api_key="your-api-key") as provider:
            data = await provider.get_current_weather(WeatherQuery(city="London"))
        ```
    """

    name = "openweather"
    base_url = "https://api.openweathermap.org/data/2.5/weather"
    requires_api_key = True

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        units: str = "metric",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize OpenWeatherMap provider.

        Args:
            api_key: OpenWeatherMap API key
            base_url: Override the endpoint URL
            units: standard, metric or imperial
            timeout: Request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        super().__init__(api_key=api_key, timeout=timeout, transport=transport)
        if base_url:
            self.base_url = base_url
        self.units = units

    async def get_current_weather(self, query: WeatherQuery) -> dict[str, Any]:
        params: dict[str, Any] = {
            "appid": self.api_key,
            "units": self.units,
            **query.to_params(),
        }

        logger.debug(f"Fetching current weather for {query.describe()}")
        response = await self._fetch(self.base_url, params=params)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                "Invalid response from weather provider",
                provider=self.name,
            ) from e
