"""FastAPI application and routes.

This module provides the read-only REST API over the precomputed event store.

## API Structure

- /api/health - Liveness check
- /api/calendar - Monthly calendars, best shots, suggestions, yearly stats
- /api/events - Day events and upcoming events
- /api/weather - Shooting weather for dates in the forecast window
- /api/locations - Shooting locations

## Wire Format

All payloads use camelCase keys (`subType`, `qualityScore`). Dates are
`YYYY-MM-DD`; times are ISO 8601 with offset.
"""

from fuji_calendar.api.app import create_app

__all__ = ["create_app"]
