"""Weather data providers."""

from fuji_calendar.providers.base import ProviderError, RateLimitError, WeatherProvider
from fuji_calendar.providers.openmeteo import OpenMeteoProvider

__all__ = [
    "WeatherProvider",
    "ProviderError",
    "RateLimitError",
    "OpenMeteoProvider",
]
