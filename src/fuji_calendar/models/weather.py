"""Weather models."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from fuji_calendar.models.base import ApiModel


class WeatherRecommendation(str, Enum):
    """How good the conditions are for photographing Fuji."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class WeatherInfo(ApiModel):
    """Forecast (or current observation, for today) for one date.

    Only available for dates between today and the end of the forecast
    window; callers treat its absence as "no forecast", not as an error.
    """

    condition: str = Field(..., description="Localized weather condition label")
    cloud_cover: float = Field(..., ge=0, le=100, description="Cloud cover (%)")
    visibility: float = Field(..., ge=0, description="Visibility (km)")
    recommendation: WeatherRecommendation

    def is_shootable(self) -> bool:
        """Check if the recommendation is good enough to plan a shoot."""
        return self.recommendation in (
            WeatherRecommendation.EXCELLENT,
            WeatherRecommendation.GOOD,
        )
