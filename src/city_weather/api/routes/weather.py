"""Current weather routes.

Proxies lookups to the configured weather provider. Requires a session.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, AsyncGenerator

import pydantic
from fastapi import APIRouter, Depends, Query

from city_weather.auth.dependencies import get_current_user_id
from city_weather.config import get_settings
from city_weather.errors import ValidationError
from city_weather.models.weather import WeatherQuery
from city_weather.providers.base import WeatherProvider
from city_weather.providers.openweather import OpenWeatherProvider

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_weather_provider() -> AsyncGenerator[WeatherProvider, None]:
    """FastAPI dependency yielding a provider with an open HTTP client."""
    settings = get_settings()
    async with OpenWeatherProvider(
        api_key=settings.openweather_api_key,
        base_url=settings.openweather_base_url,
        timeout=settings.weather_timeout_seconds,
    ) as provider:
        yield provider


def _build_query(city: str | None, lat: float | None, lon: float | None) -> WeatherQuery:
    try:
        return WeatherQuery(city=city, lat=lat, lon=lon)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        message = str(first["msg"]).removeprefix("Value error, ")
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(f"{field}: {message}" if field else message) from e


@router.get("")
async def get_current_weather(
    city: str | None = Query(default=None, description="City name"),
    lat: float | None = Query(default=None, description="Latitude"),
    lon: float | None = Query(default=None, description="Longitude"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    provider: WeatherProvider = Depends(get_weather_provider),
) -> dict[str, Any]:
    """Get current weather by city name or by coordinates."""
    query = _build_query(city, lat, lon)
    logger.info(f"Weather lookup for {query.describe()} by user {user_id}")
    return await provider.get_current_weather(query)
