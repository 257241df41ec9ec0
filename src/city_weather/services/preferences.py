"""Ownership-scoped favorite city service.

Every operation receives the user id attached by the session gate. A
preference is only visible to, and mutable by, the user whose id is stored
on it.

## Ownership Checks

Update and delete load the record by id first, then compare its stored
`user_id` with the caller's id. A missing record and a record owned by
someone else both raise the same `NotFound`, so callers cannot probe for
other users' ids.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from city_weather.database.models import Preference
from city_weather.errors import InternalError, NotFound, UserNotFound
from city_weather.services.accounts import AccountService

logger = logging.getLogger(__name__)

CITY_NOT_FOUND = "City not found"


class PreferenceService:
    """CRUD over a user's favorite cities.

    Example:
        ```python
        service = PreferenceService(db_session)

        preference = await service.add(user_id, "Rome")
        await service.update(user_id, preference.id, "Milan")
        await service.delete(user_id, preference.id)
        ```
    """

    def __init__(self, db: AsyncSession):
        """Initialize the preference service.

        Args:
            db: Database session
        """
        self.db = db

    async def _user_exists(self, user_id: uuid.UUID) -> bool:
        return await AccountService(self.db).get_user(user_id) is not None

    async def _get_owned(self, user_id: uuid.UUID, preference_id: uuid.UUID) -> Preference:
        """Load a preference and check that `user_id` owns it.

        Raises:
            NotFound: If the user is gone, the record is absent, or it belongs
                to another user
        """
        if not await self._user_exists(user_id):
            raise NotFound("User not found")

        preference = await self.db.get(Preference, preference_id)
        if preference is None:
            raise NotFound(CITY_NOT_FOUND)

        if preference.user_id != user_id:
            logger.debug(
                f"User {user_id} denied access to preference {preference_id}"
            )
            raise NotFound(CITY_NOT_FOUND)

        return preference

    async def list_all(self, user_id: uuid.UUID) -> Sequence[Preference]:
        """List every preference owned by the user, in store order.

        Raises:
            UserNotFound: If the user no longer exists
        """
        if not await self._user_exists(user_id):
            raise UserNotFound("Login required to display cities")

        result = await self.db.execute(
            select(Preference).where(Preference.user_id == user_id)
        )
        return result.scalars().all()

    async def add(self, user_id: uuid.UUID, city: str) -> Preference:
        """Save a new favorite city for the user.

        The same city may be saved more than once.

        Raises:
            UserNotFound: If the user no longer exists
            InternalError: If the store fails
        """
        if not await self._user_exists(user_id):
            raise UserNotFound("Login required to add a city")

        preference = Preference(user_id=user_id, city=city)
        self.db.add(preference)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to add favorite city")
            raise InternalError("Failed to add favorite city") from e

        await self.db.refresh(preference)
        return preference

    async def update(
        self,
        user_id: uuid.UUID,
        preference_id: uuid.UUID,
        new_city: str,
    ) -> Preference:
        """Rename one of the user's favorite cities.

        Only the `city` field changes; the owner never does.

        Raises:
            NotFound: If the record is absent or not owned by the user
            InternalError: If the store fails
        """
        preference = await self._get_owned(user_id, preference_id)

        preference.city = new_city
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to update favorite city")
            raise InternalError("Failed to update favorite city") from e

        await self.db.refresh(preference)
        return preference

    async def delete(self, user_id: uuid.UUID, preference_id: uuid.UUID) -> None:
        """Permanently remove one of the user's favorite cities.

        Raises:
            NotFound: If the record is absent or not owned by the user
            InternalError: If the store fails
        """
        preference = await self._get_owned(user_id, preference_id)

        await self.db.delete(preference)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to delete favorite city")
            raise InternalError("Failed to delete favorite city") from e
