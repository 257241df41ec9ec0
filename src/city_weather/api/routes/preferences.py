"""Favorite city routes.

Every route requires a session. The owner of a record is always the user
resolved from the session cookie; request bodies cannot name one.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from city_weather.auth.dependencies import get_current_user_id
from city_weather.database.connection import get_db_session
from city_weather.database.models import Preference
from city_weather.errors import NotFound
from city_weather.services.preferences import CITY_NOT_FOUND, PreferenceService

router = APIRouter()


class PreferenceResponse(BaseModel):
    """A favorite city."""

    id: str
    city: str
    user_id: str
    created_at: datetime | None
    updated_at: datetime | None


class PreferenceCreate(BaseModel):
    """Add favorite city request."""

    model_config = ConfigDict(extra="forbid")

    city: str = Field(..., min_length=2)


class PreferenceUpdate(BaseModel):
    """Rename favorite city request."""

    model_config = ConfigDict(extra="forbid")

    new_city: str = Field(..., min_length=2, alias="newCity")


class MessageResponse(BaseModel):
    message: str


def _to_response(preference: Preference) -> PreferenceResponse:
    return PreferenceResponse(
        id=str(preference.id),
        city=preference.city,
        user_id=str(preference.user_id),
        created_at=preference.created_at,
        updated_at=preference.updated_at,
    )


def _parse_id(preference_id: str) -> uuid.UUID:
    """Parse a path id; anything that is not a UUID cannot exist."""
    try:
        return uuid.UUID(preference_id)
    except ValueError:
        raise NotFound(CITY_NOT_FOUND) from None


@router.get("", response_model=list[PreferenceResponse])
async def list_preferences(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> list[PreferenceResponse]:
    """List the current user's favorite cities."""
    preferences = await PreferenceService(db).list_all(user_id)
    return [_to_response(p) for p in preferences]


@router.post(
    "",
    response_model=PreferenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_preference(
    data: PreferenceCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> PreferenceResponse:
    """Add a favorite city."""
    preference = await PreferenceService(db).add(user_id, data.city)
    return _to_response(preference)


@router.put("/{preference_id}", response_model=PreferenceResponse)
async def update_preference(
    preference_id: str,
    data: PreferenceUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> PreferenceResponse:
    """Rename one of the current user's favorite cities."""
    preference = await PreferenceService(db).update(
        user_id, _parse_id(preference_id), data.new_city
    )
    return _to_response(preference)


@router.delete("/{preference_id}", response_model=MessageResponse)
async def delete_preference(
    preference_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Delete one of the current user's favorite cities."""
    await PreferenceService(db).delete(user_id, _parse_id(preference_id))
    return MessageResponse(message="City has been deleted")
