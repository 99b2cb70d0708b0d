"""Favorite locations and events."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from fuji_calendar.models.base import ApiModel
from fuji_calendar.models.event import EventType


class FavoriteLocation(ApiModel):
    id: int
    name: str
    prefecture: str
    latitude: float
    longitude: float
    added_at: datetime


class FavoriteEvent(ApiModel):
    """A saved event, denormalized so it survives without the API."""

    id: str
    type: EventType
    sub_type: str
    time: datetime
    location_id: int
    location_name: str
    azimuth: float
    elevation: float = 0.0
    added_at: datetime


class Favorites(ApiModel):
    locations: list[FavoriteLocation] = Field(default_factory=list)
    events: list[FavoriteEvent] = Field(default_factory=list)


class FavoritesStats(ApiModel):
    total_locations: int = 0
    total_events: int = 0
    diamond_events: int = 0
    pearl_events: int = 0
    upcoming_events: int = 0
    past_events: int = 0
