"""Application error taxonomy.

Every error raised by the services and the session gate derives from
`AppError`. The API layer translates them into a JSON body of the form
``{"error": message}`` with the error's status code (see
`city_weather.api.errors`).

Messages are deliberately generic: they never reveal whether a username
exists or whether a record belongs to somebody else.
"""

from __future__ import annotations


class AppError(Exception):
    """Base exception for errors surfaced to API clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed client input."""

    status_code = 400
    default_message = "Invalid request"


class Unauthorized(AppError):
    """No session token was presented."""

    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AppError):
    """A session token was presented but failed verification."""

    status_code = 403
    default_message = "Invalid token"


class NotFound(AppError):
    """Record absent, or present but owned by another user."""

    status_code = 404
    default_message = "Not found"


class UserNotFound(AppError):
    """The identity in a valid token no longer resolves to a user."""

    status_code = 400
    default_message = "Login required"


class DuplicateIdentity(AppError):
    status_code = 400
    default_message = "Username already exists"


class InvalidCredentials(AppError):
    status_code = 400
    default_message = "Invalid credentials"


class UpstreamError(AppError):
    """The weather provider failed; carries the provider's status if any."""

    status_code = 500
    default_message = "Failed to fetch weather data"


class InternalError(AppError):
    status_code = 500
