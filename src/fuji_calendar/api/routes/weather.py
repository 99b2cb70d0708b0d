"""Weather routes.

Forecasts are looked up at the configured weather point for dates inside
the forecast window only.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status

from fuji_calendar.api.dependencies import get_today, get_weather_provider
from fuji_calendar.config import get_settings
from fuji_calendar.models.weather import WeatherInfo
from fuji_calendar.providers.base import ProviderError, WeatherProvider

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{target_date}", response_model=WeatherInfo)
async def get_weather(
    target_date: date,
    provider: WeatherProvider = Depends(get_weather_provider),
    today: date = Depends(get_today),
) -> WeatherInfo:
    """Shooting weather for a date."""
    settings = get_settings()

    try:
        weather = await provider.get_weather_info(
            settings.weather_coordinates, target_date, today
        )
    except ProviderError as e:
        logger.error(f"Weather lookup for {target_date} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Weather provider error: {e}",
        )

    if weather is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No forecast available for {target_date.isoformat()}",
        )

    return weather
