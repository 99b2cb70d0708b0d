"""Domain models for the Fuji calendar."""

from fuji_calendar.models.location import Coordinates, Location, LocationsResponse
from fuji_calendar.models.event import (
    Accuracy,
    BestShotsResponse,
    CalendarEvent,
    CalendarResponse,
    CalendarStats,
    DayType,
    EventSubType,
    EventType,
    EventsResponse,
    FujiEvent,
    LocationEventsResponse,
    MonthlyStats,
    ShootingPlanResponse,
    StoredEventType,
    UpcomingEventsResponse,
)
from fuji_calendar.models.weather import WeatherInfo, WeatherRecommendation
from fuji_calendar.models.favorites import (
    FavoriteEvent,
    FavoriteLocation,
    Favorites,
    FavoritesStats,
)

__all__ = [
    # Location
    "Coordinates",
    "Location",
    "LocationsResponse",
    # Event
    "Accuracy",
    "BestShotsResponse",
    "CalendarEvent",
    "CalendarResponse",
    "CalendarStats",
    "DayType",
    "EventSubType",
    "EventType",
    "EventsResponse",
    "FujiEvent",
    "LocationEventsResponse",
    "MonthlyStats",
    "ShootingPlanResponse",
    "StoredEventType",
    "UpcomingEventsResponse",
    # Weather
    "WeatherInfo",
    "WeatherRecommendation",
    # Favorites
    "FavoriteEvent",
    "FavoriteLocation",
    "Favorites",
    "FavoritesStats",
]
