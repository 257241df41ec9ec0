"""Session management using signed JWT tokens.

Sessions are stored as signed JWT tokens in HTTP-only cookies.
The tokens contain:
- User ID
- Session creation time
- Expiration time

## Security

- Tokens are signed with the application secret key
- Tokens expire after a configurable period (default: 30 days)
- Cookies are HTTP-only to prevent XSS access
- Cookies are Secure in production (HTTPS only)
- SameSite=Strict to prevent CSRF

There is no server-side revocation list. Logging out removes the cookie
from the client, but a copied token stays valid until it expires.

## Token Structure

```json
{
  "sub": "user-uuid",
  "iat": 1234567890,
  "exp": 1237159890,
  "type": "session"
}
```
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from city_weather.config import get_settings

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"
TOKEN_TYPE = "session"


class SessionTokenError(Exception):
    """Base exception for session token verification failures."""


class InvalidSessionToken(SessionTokenError):
    """Signature mismatch or malformed payload."""


class ExpiredSessionToken(SessionTokenError):
    """Token is past its expiry time."""


@dataclass
class SessionData:
    """Data stored in the session token."""

    user_id: uuid.UUID
    created_at: datetime
    expires_at: datetime

    @property
    def is_expired(self) -> bool:
        """Check if the session has expired."""
        return datetime.now(timezone.utc) > self.expires_at


def create_session_token(
    user_id: uuid.UUID,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed session token for a user.

    Args:
        user_id: The user's UUID
        expires_delta: Custom expiration time (or use default from settings)

    Returns:
        Signed JWT token string
    """
    settings = get_settings()

    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.session_max_age_seconds)

    expires_at = now + expires_delta

    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "type": TOKEN_TYPE,
    }

    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def verify_session_token(token: str) -> SessionData:
    """Verify and decode a session token.

    Args:
        token: The JWT token string

    Returns:
        SessionData for a valid token

    Raises:
        ExpiredSessionToken: If the token is past its expiry
        InvalidSessionToken: If the signature or payload is invalid
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except ExpiredSignatureError as e:
        raise ExpiredSessionToken("Session token expired") from e
    except JWTError as e:
        logger.debug(f"Session token verification failed: {e}")
        raise InvalidSessionToken("Session token is invalid") from e

    if payload.get("type") != TOKEN_TYPE:
        raise InvalidSessionToken("Unexpected token type")

    try:
        user_id = uuid.UUID(payload["sub"])
        created_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    except (KeyError, TypeError, ValueError) as e:
        logger.debug(f"Invalid token payload: {e}")
        raise InvalidSessionToken("Malformed token payload") from e

    session = SessionData(
        user_id=user_id,
        created_at=created_at,
        expires_at=expires_at,
    )

    # Check expiration (jose should handle this, but double-check)
    if session.is_expired:
        raise ExpiredSessionToken("Session token expired")

    return session
