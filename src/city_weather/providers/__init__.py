"""Weather data providers."""

from city_weather.providers.base import WeatherProvider, ProviderError
from city_weather.providers.openweather import OpenWeatherProvider

__all__ = [
    "WeatherProvider",
    "ProviderError",
    "OpenWeatherProvider",
]
