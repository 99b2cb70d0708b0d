"""Event models for Diamond Fuji and Pearl Fuji alignments."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import Field

from fuji_calendar.models.base import ApiModel
from fuji_calendar.models.location import Location


class EventType(str, Enum):
    """Which body touches the summit."""

    DIAMOND = "diamond"  # Sun
    PEARL = "pearl"  # Moon


class EventSubType(str, Enum):
    """When in the body's daily path the alignment happens."""

    SUNRISE = "sunrise"
    SUNSET = "sunset"
    RISING = "rising"
    SETTING = "setting"


class Accuracy(str, Enum):
    """Precision level of a computed alignment."""

    PERFECT = "perfect"
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"


class DayType(str, Enum):
    """Summary type of a calendar day."""

    DIAMOND = "diamond"
    PEARL = "pearl"
    BOTH = "both"


class StoredEventType(str, Enum):
    """Event type as persisted in the event store.

    Combines the body and the moment into a single value; see
    `to_public()` for the split used by the API.
    """

    DIAMOND_SUNRISE = "diamond_sunrise"
    DIAMOND_SUNSET = "diamond_sunset"
    PEARL_MOONRISE = "pearl_moonrise"
    PEARL_MOONSET = "pearl_moonset"

    def to_public(self) -> tuple[EventType, EventSubType]:
        """Split into the (type, sub type) pair exposed by the API."""
        return _STORED_TO_PUBLIC[self]


_STORED_TO_PUBLIC: dict[StoredEventType, tuple[EventType, EventSubType]] = {
    StoredEventType.DIAMOND_SUNRISE: (EventType.DIAMOND, EventSubType.SUNRISE),
    StoredEventType.DIAMOND_SUNSET: (EventType.DIAMOND, EventSubType.SUNSET),
    StoredEventType.PEARL_MOONRISE: (EventType.PEARL, EventSubType.RISING),
    StoredEventType.PEARL_MOONSET: (EventType.PEARL, EventSubType.SETTING),
}


class FujiEvent(ApiModel):
    """A single Diamond or Pearl Fuji occurrence seen from a location."""

    id: str = Field(..., description="<stored type>-<location id>-<date>")
    type: EventType
    sub_type: EventSubType
    event_date: date = Field(..., alias="date", description="Calendar date (JST)")
    time: datetime = Field(..., description="Moment of alignment")
    location: Location
    azimuth: float = Field(..., description="Azimuth of the body in degrees")
    elevation: float | None = Field(
        default=None, description="Altitude of the body in degrees"
    )
    quality_score: float | None = Field(default=None, ge=0, le=1)
    accuracy: Accuracy | None = None
    moon_phase: float | None = Field(default=None, ge=0, le=1)
    moon_illumination: float | None = Field(default=None, ge=0, le=1)

    def is_diamond(self) -> bool:
        return self.type == EventType.DIAMOND

    def is_pearl(self) -> bool:
        return self.type == EventType.PEARL


class CalendarEvent(ApiModel):
    """All events falling on one calendar day."""

    calendar_date: date = Field(..., alias="date")
    type: DayType
    events: list[FujiEvent] = Field(default_factory=list)

    @classmethod
    def from_events(cls, calendar_date: date, events: list[FujiEvent]) -> CalendarEvent:
        """Build a calendar day, deriving the day type from its events."""
        has_diamond = any(e.is_diamond() for e in events)
        has_pearl = any(e.is_pearl() for e in events)

        if has_diamond and has_pearl:
            day_type = DayType.BOTH
        elif has_diamond:
            day_type = DayType.DIAMOND
        else:
            day_type = DayType.PEARL

        return cls(
            calendar_date=calendar_date,
            type=day_type,
            events=sorted(events, key=lambda e: e.time),
        )


class CalendarResponse(ApiModel):
    """A month of calendar days, as returned by the month endpoint."""

    year: int
    month: int = Field(..., ge=1, le=12)
    events: list[CalendarEvent] = Field(default_factory=list)

    def all_events(self) -> list[FujiEvent]:
        """Flatten the calendar days into a single event list."""
        return [event for day in self.events for event in day.events]

    def event_dates(self) -> list[date]:
        return [day.calendar_date for day in self.events]


class EventsResponse(ApiModel):
    """Events of a single day."""

    event_date: date | None = Field(default=None, alias="date")
    events: list[FujiEvent] = Field(default_factory=list)


class UpcomingEventsResponse(ApiModel):
    events: list[FujiEvent] = Field(default_factory=list)


class BestShotsResponse(ApiModel):
    recommendations: list[FujiEvent] = Field(default_factory=list)


class ShootingPlanResponse(ApiModel):
    events: list[FujiEvent] = Field(default_factory=list)


class LocationEventsResponse(ApiModel):
    """A location's events for one year."""

    location: Location
    year: int
    events: list[FujiEvent] = Field(default_factory=list)


class MonthlyStats(ApiModel):
    month: int = Field(..., ge=1, le=12)
    total_events: int = 0
    diamond_events: int = 0
    pearl_events: int = 0


class CalendarStats(ApiModel):
    """Yearly event counts."""

    year: int
    total_events: int = 0
    diamond_events: int = 0
    pearl_events: int = 0
    active_locations: int = 0
    monthly_breakdown: list[MonthlyStats] = Field(default_factory=list)
