"""Pytest fixtures for Fuji calendar tests.

This module provides test fixtures that ensure:
1. No external API calls are made (calendar API, Open-Meteo)
2. No real database connections (in-memory SQLite only)
3. Isolated test environment with controlled configuration
"""

import os
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

# Set test environment BEFORE importing application modules
# This ensures no real services are contacted during test collection
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("API_BASE_URL", "http://testserver/api")
os.environ.setdefault("TIMEZONE", "Asia/Tokyo")
os.environ.setdefault("WEATHER_WINDOW_DAYS", "7")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from fuji_calendar.database.connection import close_db, create_tables, get_db, init_db
from fuji_calendar.database.models import Location as LocationRecord
from fuji_calendar.database.models import LocationEvent
from fuji_calendar.models.event import (
    Accuracy,
    CalendarEvent,
    CalendarResponse,
    EventSubType,
    EventType,
    EventsResponse,
    FujiEvent,
    StoredEventType,
)
from fuji_calendar.models.location import Location
from fuji_calendar.models.weather import WeatherInfo, WeatherRecommendation

JST = ZoneInfo("Asia/Tokyo")


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from fuji_calendar.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixed_now() -> datetime:
    """Tuesday 2025-06-10 09:00 JST."""
    return datetime(2025, 6, 10, 9, 0, tzinfo=JST)


@pytest.fixture
def mock_api_client():
    """Calendar API client double with no network access."""
    client = MagicMock()
    client.get_monthly_calendar = AsyncMock()
    client.get_day_events = AsyncMock(return_value=EventsResponse(events=[]))
    client.get_weather = AsyncMock()
    return client


# =============================================================================
# API Model Fixtures
# =============================================================================


@pytest.fixture
def sample_location() -> Location:
    """Umihotaru PA, the weather reference point."""
    return Location(
        id=2,
        name="海ほたるPA",
        prefecture="千葉県",
        latitude=35.464815,
        longitude=139.872861,
        elevation=5.0,
        fuji_azimuth=251.2,
        fuji_elevation=0.8,
        fuji_distance=102000.0,
    )


@pytest.fixture
def make_event(sample_location: Location):
    """Factory for FujiEvent instances on a given JST date and time."""

    def _make(
        day: date = date(2025, 6, 10),
        hour: int = 5,
        minute: int = 0,
        event_type: EventType = EventType.DIAMOND,
        sub_type: EventSubType = EventSubType.SUNRISE,
        location: Location | None = None,
        **kwargs,
    ) -> FujiEvent:
        location = location or sample_location
        stored = f"{event_type.value}_{sub_type.value}"
        return FujiEvent(
            id=f"{stored}-{location.id}-{day.isoformat()}",
            type=event_type,
            sub_type=sub_type,
            event_date=day,
            time=datetime(day.year, day.month, day.day, hour, minute, tzinfo=JST),
            location=location,
            azimuth=kwargs.pop("azimuth", 60.0),
            elevation=kwargs.pop("elevation", 3.0),
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_calendar(make_event) -> CalendarResponse:
    """June 2025 with three events on two days."""
    diamond = make_event(day=date(2025, 6, 10), hour=5)
    pearl = make_event(
        day=date(2025, 6, 10),
        hour=17,
        event_type=EventType.PEARL,
        sub_type=EventSubType.SETTING,
    )
    sunset = make_event(day=date(2025, 6, 15), hour=18, sub_type=EventSubType.SUNSET)
    return CalendarResponse(
        year=2025,
        month=6,
        events=[
            CalendarEvent.from_events(date(2025, 6, 10), [diamond, pearl]),
            CalendarEvent.from_events(date(2025, 6, 15), [sunset]),
        ],
    )


@pytest.fixture
def clear_weather() -> WeatherInfo:
    return WeatherInfo(
        condition="晴れ",
        cloud_cover=10,
        visibility=24,
        recommendation=WeatherRecommendation.EXCELLENT,
    )


# =============================================================================
# Event Store Fixtures
# =============================================================================


def _utc(year: int, month: int, day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def build_event_store_rows() -> list:
    """Three locations and seven events in 2025 (times in UTC).

    | id | location | type | JST date/time | accuracy | quality |
    |----|----------|------|---------------|----------|---------|
    | a | 1 | diamond_sunrise | 06-10 04:50 | perfect | 0.9 |
    | b | 2 | pearl_moonset | 06-10 17:30 | good | 0.5 |
    | c | 2 | diamond_sunset | 06-15 18:40 | excellent | 0.8 |
    | d | 1 | pearl_moonrise | 06-20 22:00 | fair | 0.3 |
    | e | 2 | diamond_sunrise | 07-03 05:10 | perfect | 0.7 |
    | f | 1 | diamond_sunset | 05-31 18:00 | good | 0.6 |
    | g | 1 | pearl_moonset | 12-01 06:00 | good | 0.4 |
    """
    locations = [
        LocationRecord(
            id=1,
            name="竜ヶ岳",
            prefecture="山梨県",
            latitude=35.4283,
            longitude=138.6043,
            elevation=1485.0,
            fuji_azimuth=79.2,
            fuji_elevation=3.1,
            fuji_distance=18500.0,
        ),
        LocationRecord(
            id=2,
            name="海ほたるPA",
            prefecture="千葉県",
            latitude=35.464815,
            longitude=139.872861,
            elevation=5.0,
            fuji_azimuth=251.2,
            fuji_elevation=0.8,
            fuji_distance=102000.0,
        ),
        LocationRecord(
            id=3,
            name="毛無山",
            prefecture="静岡県",
            latitude=35.4172,
            longitude=138.5425,
            elevation=1964.0,
        ),
    ]

    def event(location_id, stored_type, when, jst_date, accuracy, quality, altitude, **extra):
        return LocationEvent(
            location_id=location_id,
            event_type=stored_type,
            event_date=jst_date,
            event_time=when,
            azimuth=extra.pop("azimuth", 70.0),
            altitude=altitude,
            accuracy=accuracy,
            quality_score=quality,
            calculation_year=jst_date.year,
            **extra,
        )

    events = [
        event(1, StoredEventType.DIAMOND_SUNRISE, _utc(2025, 6, 9, 19, 50),
              date(2025, 6, 10), Accuracy.PERFECT, 0.9, 3.0),
        event(2, StoredEventType.PEARL_MOONSET, _utc(2025, 6, 10, 8, 30),
              date(2025, 6, 10), Accuracy.GOOD, 0.5, 5.0,
              moon_phase=0.5, moon_illumination=0.98),
        event(2, StoredEventType.DIAMOND_SUNSET, _utc(2025, 6, 15, 9, 40),
              date(2025, 6, 15), Accuracy.EXCELLENT, 0.8, 1.5),
        event(1, StoredEventType.PEARL_MOONRISE, _utc(2025, 6, 20, 13, 0),
              date(2025, 6, 20), Accuracy.FAIR, 0.3, 12.0),
        event(2, StoredEventType.DIAMOND_SUNRISE, _utc(2025, 7, 2, 20, 10),
              date(2025, 7, 3), Accuracy.PERFECT, 0.7, 2.5),
        event(1, StoredEventType.DIAMOND_SUNSET, _utc(2025, 5, 31, 9, 0),
              date(2025, 5, 31), Accuracy.GOOD, 0.6, 4.0),
        event(1, StoredEventType.PEARL_MOONSET, _utc(2025, 11, 30, 21, 0),
              date(2025, 12, 1), Accuracy.GOOD, 0.4, 6.0),
    ]
    return [*locations, *events]


@pytest.fixture
def event_store():
    """Open a seeded in-memory event store.

    Use inside a coroutine:
    ```python
    async with event_store() as session:
        ...
    ```
    """

    @asynccontextmanager
    async def _open():
        await init_db("sqlite+aiosqlite://")
        try:
            await create_tables()
            async with get_db() as session:
                session.add_all(build_event_store_rows())
                await session.commit()

            async with get_db() as session:
                yield session
        finally:
            await close_db()

    return _open
