"""Domain models for the city weather API."""

from city_weather.models.weather import Coordinates, WeatherQuery

__all__ = [
    "Coordinates",
    "WeatherQuery",
]
