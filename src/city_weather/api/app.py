"""City weather application factory.

Builds the FastAPI app: the database lifespan, CORS for the browser client,
the `{"error": ...}` exception handlers, and the routers mounted under
`/api`:

- `/api/auth`: register, login, logout, session status
- `/api/preferences`: the caller's favorite cities
- `/api/weather`: current weather relayed from OpenWeatherMap

`city-weather serve` runs it with uvicorn through `create_app` as a factory.
Settings come from the environment; see `city_weather.config`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from city_weather.api.errors import register_exception_handlers
from city_weather.config import get_settings
from city_weather.database.connection import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the database on startup and disposes of it on shutdown.
    """
    settings = get_settings()

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    await init_db()

    yield

    logger.info("Shutting down")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Settings are read here, so a missing secret or API key fails at
    startup rather than on the first request.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Favorite cities and current weather",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # The browser client sends the session cookie cross-origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    register_exception_handlers(app)

    from city_weather.api.routes import auth, preferences, weather

    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(preferences.router, prefix="/api/preferences", tags=["Preferences"])
    app.include_router(weather.router, prefix="/api/weather", tags=["Weather"])

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness probe; does not touch the database."""
        return {"status": "healthy", "version": settings.app_version}

    return app
