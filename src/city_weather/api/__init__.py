"""FastAPI application and routes.

This module provides the REST API for the city weather service.

## API Structure

- /api/auth - Registration, login, logout
- /api/preferences - Favorite cities (owner-scoped)
- /api/weather - Current weather by city or coordinates

## Authentication

All /api/preferences and /api/weather endpoints require the session cookie
set by register or login.

## Errors

Every error response has the body {"error": "<message>"}.
"""

from city_weather.api.app import create_app

__all__ = ["create_app"]
