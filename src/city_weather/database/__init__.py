"""Database module for the city weather API.

This module provides:
- SQLAlchemy async database connection
- User and Preference models
"""

from city_weather.database.connection import (
    get_db,
    get_db_session,
    init_db,
    close_db,
    create_tables,
)
from city_weather.database.models import (
    Base,
    User,
    Preference,
)

__all__ = [
    # Connection
    "get_db",
    "get_db_session",
    "init_db",
    "close_db",
    "create_tables",
    # Models
    "Base",
    "User",
    "Preference",
]
