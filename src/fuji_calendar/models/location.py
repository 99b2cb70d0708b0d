"""Location models for the Fuji calendar."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from fuji_calendar.models.base import ApiModel


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

    def to_tuple(self) -> tuple[float, float]:
        """Return coordinates as (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


class Location(ApiModel):
    """A shooting location from which Fuji alignment events are observed.

    The fuji_* fields are precomputed from the location to the summit:
    azimuth and elevation angle in degrees, distance in meters.
    """

    id: int
    name: str
    prefecture: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    elevation: float = Field(..., description="Elevation above sea level in meters")
    description: str | None = None
    access_info: str | None = None
    parking_info: str | None = None
    fuji_azimuth: float | None = None
    fuji_elevation: float | None = None
    fuji_distance: float | None = None
    measurement_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)

    def display_name(self) -> str:
        """Get a display name for this location."""
        return f"{self.name} ({self.prefecture})"


class LocationsResponse(ApiModel):
    """Payload of the location listing endpoint."""

    locations: list[Location] = Field(default_factory=list)
