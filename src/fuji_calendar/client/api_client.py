"""REST client for the Fuji calendar API.

Thin async wrapper over the JSON endpoints served by `fuji_calendar.api`.
Every method either returns a typed payload or raises `ApiError`.

## Endpoints

| Method | Path |
|--------|------|
| get_monthly_calendar | GET /calendar/{year}/{month} |
| get_best_shot_days | GET /calendar/{year}/{month}/best-shots |
| get_day_events | GET /events/{YYYY-MM-DD} |
| get_upcoming_events | GET /events/upcoming?limit=N |
| get_weather | GET /weather/{YYYY-MM-DD} |
| get_locations | GET /locations |

Requests are not retried; callers decide what a failure means.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from fuji_calendar.config import get_settings
from fuji_calendar.models.base import ApiModel
from fuji_calendar.models.event import (
    BestShotsResponse,
    CalendarResponse,
    EventsResponse,
    FujiEvent,
    UpcomingEventsResponse,
)
from fuji_calendar.models.location import Location, LocationsResponse
from fuji_calendar.models.weather import WeatherInfo

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=ApiModel)

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"


class ApiError(Exception):
    """Raised when an API call fails at the transport or server level."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body


def get_error_message(error: BaseException) -> str:
    """Extract a human-readable message from any failure."""
    if isinstance(error, ApiError) and error.message:
        return error.message
    message = str(error)
    return message or DEFAULT_ERROR_MESSAGE


def _error_message_from_response(response: httpx.Response) -> str:
    """Prefer the server's own message over a generic status line."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value

    return f"HTTP error! status: {response.status_code}"


class CalendarApiClient:
    """Async client for the calendar API.

    Example:
        ```python
        async with CalendarApiClient("https://fuji.example.com/api") as client:
            calendar = await client.get_monthly_calendar(2025, 6)
            day = await client.get_day_events("2025-06-10")
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, e.g. "http://localhost:8000/api".
                Defaults to settings.api_base_url.
            timeout: Request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> CalendarApiClient:
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        client = self._get_client()
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Request to {path} failed: {e!r}")
            raise ApiError(str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            raise ApiError(
                _error_message_from_response(response),
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON response from {path}",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

    async def _get_model(
        self,
        model: type[ModelT],
        path: str,
        params: dict[str, Any] | None = None,
    ) -> ModelT:
        data = await self._get_json(path, params=params)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ApiError(f"Unexpected response payload from {path}: {e}") from e

    async def get_monthly_calendar(self, year: int, month: int) -> CalendarResponse:
        """Get all calendar days with events for a month."""
        return await self._get_model(CalendarResponse, f"/calendar/{year}/{month}")

    async def get_day_events(self, date: str) -> EventsResponse:
        """Get the events of one day.

        Args:
            date: ISO date string (YYYY-MM-DD)
        """
        return await self._get_model(EventsResponse, f"/events/{date}")

    async def get_weather(self, date: str) -> WeatherInfo:
        """Get the shooting weather for one day.

        Raises:
            ApiError: Also when no forecast exists for the date (404)
        """
        return await self._get_model(WeatherInfo, f"/weather/{date}")

    async def get_upcoming_events(self, limit: int = 50) -> list[FujiEvent]:
        result = await self._get_model(
            UpcomingEventsResponse, "/events/upcoming", params={"limit": limit}
        )
        return result.events

    async def get_best_shot_days(self, year: int, month: int) -> list[FujiEvent]:
        result = await self._get_model(
            BestShotsResponse, f"/calendar/{year}/{month}/best-shots"
        )
        return result.recommendations

    async def get_locations(self) -> list[Location]:
        result = await self._get_model(LocationsResponse, "/locations")
        return result.locations
