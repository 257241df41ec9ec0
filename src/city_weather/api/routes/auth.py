"""Authentication routes.

Handles registration, login and logout.

## Endpoints

1. POST /api/auth/register - Create an account and start a session
2. POST /api/auth/login - Check credentials and start a session
3. POST /api/auth/logout - Clear the session cookie
4. GET /api/auth/me - Get current authentication status

## Session Management

Sessions are stored in HTTP-only cookies. The session token is a signed JWT
containing the user ID and expiration time.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from city_weather.auth.dependencies import get_current_user_optional, get_session_token
from city_weather.auth.session import (
    SessionTokenError,
    create_session_token,
    verify_session_token,
)
from city_weather.config import get_settings
from city_weather.database.connection import get_db_session
from city_weather.database.models import User
from city_weather.services.accounts import AccountService

logger = logging.getLogger(__name__)

router = APIRouter()


class RegisterRequest(BaseModel):
    """Registration request."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=3, max_length=30)
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    """Login request."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    """User information response."""

    id: str
    username: str
    created_at: datetime | None


class AuthStatusResponse(BaseModel):
    """Authentication status response."""

    authenticated: bool
    user: UserResponse | None = None


def _set_session_cookie(response: Response, user: User) -> None:
    """Issue a session token for `user` and attach it as a cookie."""
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user.id),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    data: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Register a new user and log them in."""
    user = await AccountService(db).register(data.username, data.password)
    _set_session_cookie(response, user)
    return MessageResponse(message="Registration successful")


@router.post("/login", response_model=MessageResponse)
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Log in with username and password.

    Unknown usernames and wrong passwords get the same error.
    """
    user = await AccountService(db).authenticate(data.username, data.password)
    _set_session_cookie(response, user)

    logger.info(f"User {user.username} logged in")

    return MessageResponse(message="Login successful")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
) -> MessageResponse:
    """Log out the current user.

    Clears the session cookie. Succeeds whether or not a session exists and
    never touches the database.
    """
    settings = get_settings()

    if token is not None:
        try:
            session = verify_session_token(token)
        except SessionTokenError as e:
            logger.debug(f"Logout with unverifiable session token: {e}")
        else:
            logger.info(f"User {session.user_id} logged out")

    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )

    return MessageResponse(message="Logged out")


@router.get("/me", response_model=AuthStatusResponse)
async def get_auth_status(
    user: User | None = Depends(get_current_user_optional),
) -> AuthStatusResponse:
    """Get the current authentication status and user info."""
    if user:
        return AuthStatusResponse(
            authenticated=True,
            user=UserResponse(
                id=str(user.id),
                username=user.username,
                created_at=user.created_at,
            ),
        )

    return AuthStatusResponse(authenticated=False)
