"""HTTP client for the calendar REST API."""

from fuji_calendar.client.api_client import (
    ApiError,
    CalendarApiClient,
    get_error_message,
)

__all__ = [
    "ApiError",
    "CalendarApiClient",
    "get_error_message",
]
