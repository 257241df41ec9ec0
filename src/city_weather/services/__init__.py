"""Application services."""

from city_weather.services.accounts import AccountService
from city_weather.services.preferences import PreferenceService

__all__ = [
    "AccountService",
    "PreferenceService",
]
