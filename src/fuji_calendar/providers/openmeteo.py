"""Open-Meteo weather provider.

## API Documentation Summary
Source: https://open-meteo.com/en/docs

## Endpoint
- Base URL: https://api.open-meteo.com/v1/forecast
- Full URL example:
  https://api.open-meteo.com/v1/forecast?latitude=35.46&longitude=139.87&daily=weather_code&timezone=Asia/Tokyo

## Authentication
- No API key required for non-commercial use

## Request
| Parameter | Value |
|-----------|-------|
| daily | weather_code,cloud_cover_mean,visibility_mean |
| current | weather_code,cloud_cover,visibility |
| timezone | configured viewer timezone |
| forecast_days | window + 1 (today through the last window day) |

## Response Format
```json
{
  "current": {"weather_code": 1, "cloud_cover": 20, "visibility": 24140.0},
  "daily": {
    "time": ["2025-06-01", "2025-06-02", ...],
    "weather_code": [1, 3, ...],
    "cloud_cover_mean": [20, 85, ...],
    "visibility_mean": [24000.0, 9000.0, ...]
  }
}
```

## Translation (Open-Meteo -> WeatherInfo)
| Open-Meteo Field | WeatherInfo Field | Notes |
|------------------|-------------------|-------|
| weather_code | condition | WMO code -> Japanese label |
| cloud_cover / cloud_cover_mean | cloud_cover | % |
| visibility / visibility_mean | visibility | m -> km, rounded |

Today uses the `current` block; later days use `daily[offset]`. A response
without an entry for the requested day is a ProviderError. Null values fall
back to code 0, 0% cloud and 15 km visibility.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fuji_calendar.models.location import Coordinates
from fuji_calendar.models.weather import WeatherInfo, WeatherRecommendation
from fuji_calendar.providers.base import ProviderError, WeatherProvider

logger = logging.getLogger(__name__)

DEFAULT_VISIBILITY_M = 15000.0

CLEAR = "晴れ"
MAINLY_CLEAR = "概ね晴れ"
PARTLY_CLOUDY = "一部曇り"
CLOUDY = "曇り"
FOG = "霧"
DRIZZLE = "小雨"
RAIN = "雨"
SNOW = "雪"
RAIN_SHOWERS = "にわか雨"
SNOW_SHOWERS = "にわか雪"
THUNDERSTORM = "雷雨"
UNKNOWN = "不明"

# WMO weather interpretation codes
WMO_CODE_TO_CONDITION: dict[int, str] = {
    0: CLEAR,
    1: MAINLY_CLEAR,
    2: PARTLY_CLOUDY,
    3: CLOUDY,
    45: FOG,
    48: FOG,
    51: DRIZZLE,
    53: DRIZZLE,
    55: DRIZZLE,
    56: DRIZZLE,
    57: DRIZZLE,
    61: RAIN,
    63: RAIN,
    65: RAIN,
    66: RAIN,
    67: RAIN,
    71: SNOW,
    73: SNOW,
    75: SNOW,
    77: SNOW,
    80: RAIN_SHOWERS,
    81: RAIN_SHOWERS,
    82: RAIN_SHOWERS,
    85: SNOW_SHOWERS,
    86: SNOW_SHOWERS,
    95: THUNDERSTORM,
    96: THUNDERSTORM,
    99: THUNDERSTORM,
}


def map_weather_code(code: int) -> str:
    """Map a WMO weather code to a Japanese condition label."""
    return WMO_CODE_TO_CONDITION.get(code, UNKNOWN)


def calculate_recommendation(
    condition: str,
    cloud_cover: float,
    visibility_km: float,
) -> WeatherRecommendation:
    """Rate how photographable the summit will be.

    Precipitation, thunder and fog rule a shoot out. Clear skies with
    little cloud and long visibility are excellent.
    """
    if "雨" in condition or "雪" in condition or "雷" in condition:
        return WeatherRecommendation.POOR

    if condition == FOG:
        return WeatherRecommendation.POOR

    if condition in (CLEAR, MAINLY_CLEAR) and cloud_cover < 30 and visibility_km > 15:
        return WeatherRecommendation.EXCELLENT

    if condition in (CLEAR, MAINLY_CLEAR, PARTLY_CLOUDY) or (
        condition == CLOUDY and cloud_cover < 50
    ):
        return WeatherRecommendation.GOOD if visibility_km > 10 else WeatherRecommendation.FAIR

    if condition == CLOUDY:
        return WeatherRecommendation.FAIR if visibility_km > 10 else WeatherRecommendation.POOR

    return WeatherRecommendation.FAIR


def _daily_value(daily: dict[str, Any], key: str, index: int) -> Any:
    values = daily.get(key) or []
    if index < len(values):
        return values[index]
    return None


class OpenMeteoProvider(WeatherProvider):
    """Open-Meteo forecast provider.

    Example:
        ```python
        async with OpenMeteoProvider(timezone="Asia/Tokyo") as provider:
            weather = await provider.get_weather_info(
                Coordinates(latitude=35.4648, longitude=139.8729),
                date(2025, 6, 3),
                today=date(2025, 6, 1),
            )
        ```
    """

    name = "open-meteo"
    base_url = "https://api.open-meteo.com/v1/forecast"

    async def get_weather_info(
        self,
        coordinates: Coordinates,
        target_date: date,
        today: date,
    ) -> WeatherInfo | None:
        offset = self.day_offset(target_date, today)
        if offset is None:
            logger.debug(f"{target_date} is outside the forecast window")
            return None

        params = {
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "daily": "weather_code,cloud_cover_mean,visibility_mean",
            "current": "weather_code,cloud_cover,visibility",
            "timezone": self.timezone,
            "forecast_days": self.forecast_window_days + 1,
        }

        response = await self._fetch(self.base_url, params=params)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"Failed to parse response: {e}",
                provider=self.name,
                response_body=response.text,
            ) from e

        weather = self._translate_response(data, offset)
        logger.debug(
            f"Weather for {target_date} at {coordinates}: {weather.condition}, "
            f"cloud {weather.cloud_cover}%, visibility {weather.visibility}km, "
            f"{weather.recommendation.value}"
        )
        return weather

    def _translate_response(
        self,
        response_data: dict[str, Any],
        day_offset: int,
    ) -> WeatherInfo:
        if day_offset == 0:
            current = response_data.get("current") or {}
            code = current.get("weather_code")
            cloud_cover = current.get("cloud_cover")
            visibility_m = current.get("visibility")
        else:
            daily = response_data.get("daily") or {}
            if day_offset >= len(daily.get("weather_code") or []):
                raise ProviderError(
                    f"No daily forecast for day offset {day_offset}",
                    provider=self.name,
                )
            code = _daily_value(daily, "weather_code", day_offset)
            cloud_cover = _daily_value(daily, "cloud_cover_mean", day_offset)
            visibility_m = _daily_value(daily, "visibility_mean", day_offset)

        code = int(code or 0)
        cloud_cover = float(cloud_cover or 0)
        visibility_km = float(visibility_m or DEFAULT_VISIBILITY_M) / 1000

        condition = map_weather_code(code)
        return WeatherInfo(
            condition=condition,
            cloud_cover=cloud_cover,
            visibility=round(visibility_km),
            recommendation=calculate_recommendation(condition, cloud_cover, visibility_km),
        )
