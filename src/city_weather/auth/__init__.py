"""Authentication module for the city weather API.

Provides password hashing, signed session tokens and the FastAPI
dependency that gates every privileged route.

## Flow

1. User registers or logs in with username and password
2. Password is checked against its bcrypt hash
3. A signed session token is issued and set as an HTTP-only cookie
4. Each privileged request is verified by `get_current_user_id`
5. Logout clears the cookie

## Security

- Passwords are stored only as bcrypt hashes
- Sessions use signed, expiring cookies (SameSite=Strict)
- HTTPS (Secure cookies) required in production
"""

from city_weather.auth.passwords import (
    hash_password,
    verify_password,
)
from city_weather.auth.session import (
    create_session_token,
    verify_session_token,
    SessionData,
    SessionTokenError,
    InvalidSessionToken,
    ExpiredSessionToken,
)
from city_weather.auth.dependencies import (
    get_current_user_id,
    get_current_user_optional,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_session_token",
    "verify_session_token",
    "SessionData",
    "SessionTokenError",
    "InvalidSessionToken",
    "ExpiredSessionToken",
    "get_current_user_id",
    "get_current_user_optional",
]
