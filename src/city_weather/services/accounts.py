"""Account service: registration and credential checks.

## Registration

1. Reject the username if it is already taken
2. Hash the password with bcrypt (off the event loop)
3. Insert the user; a concurrent insert of the same name trips the unique
   constraint and is reported as a duplicate as well

## Login

Unknown usernames and wrong passwords fail with the same
`InvalidCredentials` error so the API cannot be used to enumerate accounts.
Unknown usernames are still checked against a throwaway bcrypt hash so both
failures take the same time.
"""

from __future__ import annotations

import logging
import uuid
from functools import lru_cache

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from city_weather.auth.passwords import hash_password, verify_password
from city_weather.database.models import User
from city_weather.errors import DuplicateIdentity, InternalError, InvalidCredentials

logger = logging.getLogger(__name__)


@lru_cache
def _dummy_hash() -> str:
    """Hash checked for unknown usernames so every login pays the bcrypt cost."""
    return hash_password("unknown-user-placeholder-password")


def _check_password(password: str, password_hash: str | None) -> bool:
    """Verify a password; with no stored hash, check a throwaway one and fail."""
    if password_hash is None:
        verify_password(password, _dummy_hash())
        return False
    return verify_password(password, password_hash)


class AccountService:
    """Lookup and insert of user identities.

    Example:
        ```python
        service = AccountService(db_session)
        user = await service.register("alice", "secret1")
        same = await service.authenticate("alice", "secret1")
        ```
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: uuid.UUID) -> User | None:
        """Get a user by id, or None."""
        return await self.db.get(User, user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        """Get a user by username, or None."""
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def register(self, username: str, password: str) -> User:
        """Create a new user.

        Args:
            username: Unique username (length already validated)
            password: Raw password (length already validated)

        Returns:
            The persisted user

        Raises:
            DuplicateIdentity: If the username is taken
            InternalError: If the store fails
        """
        try:
            if await self.get_user_by_username(username) is not None:
                raise DuplicateIdentity()

            password_hash = await run_in_threadpool(hash_password, password)

            user = User(username=username, password_hash=password_hash)
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(f"Concurrent registration for username {username!r}")
            raise DuplicateIdentity() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to register user")
            raise InternalError("Registration failed") from e

        logger.info(f"Registered user {user.username}")
        return user

    async def authenticate(self, username: str, password: str) -> User:
        """Check a username/password pair.

        Raises:
            InvalidCredentials: If the user is unknown or the password is wrong
            InternalError: If the store fails
        """
        try:
            user = await self.get_user_by_username(username)
        except SQLAlchemyError as e:
            logger.exception("Failed to look up user")
            raise InternalError("Login failed") from e

        password_hash = user.password_hash if user is not None else None
        if not await run_in_threadpool(_check_password, password, password_hash):
            logger.info(f"Failed login for username {username!r}")
            raise InvalidCredentials()

        return user
