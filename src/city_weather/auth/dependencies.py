"""FastAPI dependencies for authentication.

`get_current_user_id` is the single authentication gate: it reads the
session cookie, verifies it, and attaches the user id to
``request.state.user_id``. Route handlers trust that id and never look at
the token themselves.

## Usage

```python
import uuid

from fastapi import Depends
from city_weather.auth import get_current_user_id

@router.get("/preferences")
async def list_preferences(user_id: uuid.UUID = Depends(get_current_user_id)):
    ...
```
"""

from __future__ import annotations

import logging
import uuid

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from city_weather.auth.session import SessionTokenError, verify_session_token
from city_weather.config import get_settings
from city_weather.database.connection import get_db_session
from city_weather.database.models import User
from city_weather.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)


def get_session_token(request: Request) -> str | None:
    """Read the raw session token from the session cookie."""
    settings = get_settings()
    return request.cookies.get(settings.session_cookie_name) or None


async def get_current_user_id(
    request: Request,
    token: str | None = Depends(get_session_token),
) -> uuid.UUID:
    """Require an authenticated session.

    Raises 401 if no token was sent and 403 if the token does not verify.
    """
    if token is None:
        raise Unauthorized()

    try:
        session = verify_session_token(token)
    except SessionTokenError as e:
        logger.debug(f"Rejected session token: {e}")
        raise Forbidden() from e

    request.state.user_id = session.user_id
    return session.user_id


async def get_current_user_optional(
    request: Request,
    token: str | None = Depends(get_session_token),
    db: AsyncSession = Depends(get_db_session),
) -> User | None:
    """Get the current user if logged in, or None.

    Use this for routes that work with or without authentication.
    """
    if token is None:
        return None

    try:
        session = verify_session_token(token)
    except SessionTokenError:
        return None

    user = await db.get(User, session.user_id)
    if user is None:
        logger.warning(f"Session for non-existent user: {session.user_id}")
        return None

    request.state.user_id = user.id
    return user
