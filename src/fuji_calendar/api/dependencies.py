"""FastAPI dependencies shared by the route modules."""

from __future__ import annotations

from datetime import date, datetime
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fuji_calendar.config import get_settings
from fuji_calendar.database.connection import get_db_session
from fuji_calendar.providers.base import WeatherProvider
from fuji_calendar.providers.openmeteo import OpenMeteoProvider
from fuji_calendar.services.calendar import CalendarService


async def get_calendar_service(
    db: AsyncSession = Depends(get_db_session),
) -> CalendarService:
    return CalendarService(db)


async def get_weather_provider() -> AsyncGenerator[WeatherProvider, None]:
    """Yield a weather provider configured from settings, closed afterwards."""
    settings = get_settings()
    provider = OpenMeteoProvider(
        base_url=settings.open_meteo_base_url,
        timezone=settings.timezone,
        forecast_window_days=settings.weather_window_days,
        user_agent=f"fuji-calendar/{settings.app_version}",
    )
    try:
        yield provider
    finally:
        await provider.aclose()


def get_today() -> date:
    """Current date in the configured timezone."""
    return datetime.now(get_settings().tzinfo).date()
