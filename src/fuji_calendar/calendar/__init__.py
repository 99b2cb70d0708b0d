"""Calendar view-state aggregation.

Drives the month, day and weather fetches behind a calendar view and
keeps the resulting view-state consistent when loads overlap.

## Features

- Month calendar with loading and error state
- Selected day events
- Weather for days inside the forecast window
- Manual refresh and change listeners
"""

from fuji_calendar.calendar.aggregator import (
    AstronomicalEventsAggregator,
    CalendarViewState,
    normalize_date,
)

__all__ = [
    "AstronomicalEventsAggregator",
    "CalendarViewState",
    "normalize_date",
]
