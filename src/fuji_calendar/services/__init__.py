"""Server-side and local services.

- CalendarService: calendar, event and location queries over the event store
- FavoritesService: favorite locations and events in a local JSON file
"""

from fuji_calendar.services.calendar import (
    CalendarService,
    LocationNotFoundError,
    calculate_event_score,
    calendar_grid_range,
    group_events_by_date,
    to_fuji_event,
)
from fuji_calendar.services.favorites import FavoritesService

__all__ = [
    "CalendarService",
    "LocationNotFoundError",
    "calculate_event_score",
    "calendar_grid_range",
    "group_events_by_date",
    "to_fuji_event",
    "FavoritesService",
]
