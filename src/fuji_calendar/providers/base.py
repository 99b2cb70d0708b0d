"""Base weather provider abstraction.

Weather providers look up the conditions for a single date at a single
point and translate the provider's response into our `WeatherInfo` model.

## Forecast Window

Providers only answer for dates from today up to `forecast_window_days`
ahead (inclusive). Anything outside the window returns ``None`` without
calling the provider; a missing forecast is not an error.

## Supported Providers

### Open-Meteo (open-meteo.com)
- Endpoint: https://api.open-meteo.com/v1/forecast
- Auth: None required for basic use
- Rate limit: 10,000 requests/day (non-commercial)
- Key response path: current{}, daily{} objects with arrays
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fuji_calendar.models.location import Coordinates
from fuji_calendar.models.weather import WeatherInfo


class ProviderError(Exception):
    """Base exception for weather provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class WeatherProvider(ABC):
    """Abstract base class for weather data providers.

    Attributes:
        name: Human-readable provider name
        base_url: Base URL for the API
    """

    name: str
    base_url: str

    def __init__(
        self,
        base_url: str | None = None,
        timezone: str = "Asia/Tokyo",
        forecast_window_days: int = 7,
        user_agent: str | None = None,
        timeout: float = 30.0,
    ):
        """Initialize the provider.

        Args:
            base_url: Override for the provider endpoint
            timezone: IANA timezone the provider should report days in
            forecast_window_days: Last day offset (inclusive) to look up
            user_agent: User-Agent string for requests
            timeout: Request timeout in seconds
        """
        if base_url:
            self.base_url = base_url
        self.timezone = timezone
        self.forecast_window_days = forecast_window_days
        self.user_agent = user_agent or "fuji-calendar/0.2.0"
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> WeatherProvider:
        """Enter async context manager."""
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def day_offset(self, target_date: date, today: date) -> int | None:
        """Return target_date's offset from today if inside the forecast window."""
        offset = (target_date - today).days
        if 0 <= offset <= self.forecast_window_days:
            return offset
        return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    async def _send(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        client = self._get_client()
        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        return await client.get(url, params=params, headers=request_headers)

    async def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Fetch data from the API with retry logic.

        Timeouts and network errors are retried before giving up.

        Args:
            url: Full URL to fetch
            params: Query parameters
            headers: Additional headers

        Returns:
            HTTP response

        Raises:
            ProviderError: If request fails after retries
            RateLimitError: If rate limit is exceeded
        """
        try:
            response = await self._send(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(
                f"API request failed: {str(e) or type(e).__name__}",
                provider=self.name,
            ) from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after else None,
                status_code=429,
            )

        if response.status_code >= 400:
            raise ProviderError(
                f"API request failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        return response

    @abstractmethod
    async def get_weather_info(
        self,
        coordinates: Coordinates,
        target_date: date,
        today: date,
    ) -> WeatherInfo | None:
        """Get shooting conditions for a date.

        Args:
            coordinates: Location coordinates
            target_date: Date to look up
            today: Current date in the provider's timezone

        Returns:
            WeatherInfo, or None when target_date is outside the window

        Raises:
            ProviderError: If the forecast cannot be retrieved
        """

    @abstractmethod
    def _translate_response(
        self,
        response_data: dict[str, Any],
        day_offset: int,
    ) -> WeatherInfo:
        """Translate provider-specific response to a WeatherInfo.

        Args:
            response_data: Raw JSON response from provider
            day_offset: Days from today of the requested date

        Returns:
            WeatherInfo for that day
        """
