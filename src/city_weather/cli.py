"""Command-line interface for the city weather API."""

import argparse
import asyncio
import logging
import sys

from city_weather import __version__


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _init_db() -> None:
    from city_weather.database.connection import close_db, create_tables, init_db

    await init_db()
    try:
        await create_tables()
    finally:
        await close_db()


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="City Weather API - favorite cities and current weather"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address (default: HOST setting)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT setting)")
    serve_parser.add_argument(
        "--reload", action="store_true", help="Reload on code changes"
    )

    # Init-db command
    subparsers.add_parser("init-db", help="Create database tables")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    from city_weather.config import get_settings

    settings = get_settings()
    _configure_logging(settings.log_level)

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "city_weather.api:create_app",
            factory=True,
            host=args.host or settings.host,
            port=args.port or settings.port,
            reload=args.reload,
            log_level=settings.log_level.lower(),
        )
    elif args.command == "init-db":
        asyncio.run(_init_db())
        print("Database tables created.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
