"""Weather lookup request models."""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinates(BaseModel):
    """Geographic coordinates (latitude/longitude).

    Latitude:
        - Negative (-) = south of equator
        - Positive (+) = north of equator
        - Range: -90 to +90

    Longitude:
        - Negative (-) = west of prime meridian
        - Positive (+) = east of prime meridian
        - Range: -180 to +180
    """

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"


class WeatherQuery(BaseModel):
    """A current-weather lookup by city name or by coordinates.

    Exactly one form must be given: `city`, or both `lat` and `lon`.
    """

    model_config = ConfigDict(extra="forbid")

    city: str | None = Field(default=None, min_length=2, description="City name")
    lat: float | None = Field(default=None, ge=-90, le=90, description="Latitude")
    lon: float | None = Field(default=None, ge=-180, le=180, description="Longitude")

    @model_validator(mode="after")
    def validate_one_location(self) -> Self:
        """Require a city or a full coordinate pair, but not both."""
        has_city = self.city is not None
        has_lat = self.lat is not None
        has_lon = self.lon is not None

        if has_lat != has_lon:
            raise ValueError("Both lat and lon are required")
        if has_city and has_lat:
            raise ValueError("Provide either city or lat/lon, not both")
        if not has_city and not has_lat:
            raise ValueError("Either city or lat/lon is required")
        return self

    @property
    def coordinates(self) -> Coordinates | None:
        """Coordinates for a lat/lon query, None for a city query."""
        if self.lat is None or self.lon is None:
            return None
        return Coordinates(latitude=self.lat, longitude=self.lon)

    def to_params(self) -> dict[str, Any]:
        """Provider query parameters identifying the location."""
        if self.city is not None:
            return {"q": self.city}
        return {"lat": self.lat, "lon": self.lon}

    def describe(self) -> str:
        """Short label for logs."""
        return self.city if self.city is not None else str(self.coordinates)
