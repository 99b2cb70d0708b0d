"""Calendar queries over the precomputed event store.

Reads `location_events` rows and turns them into the API's `FujiEvent` and
`CalendarEvent` models. Nothing here computes astronomy; every event is
already stored with its date, time and geometry.

## Date Ranges

All ranges filter on `event_date`, the calendar date of the event in the
configured timezone (JST by default).

- Monthly calendar: the whole visible grid, from the Sunday on or before
  the 1st to the Saturday on or after the last day of the month
- Best shots: the month itself
- Upcoming: events after now and at most 30 days ahead

## Best-Shot Scoring

| Factor | Points |
|--------|--------|
| quality_score | x 100 |
| accuracy | perfect 50, excellent 40, good 30, fair 20 |
| body elevation | 2-10 deg 30, 1-15 deg 20, >0 deg 10 |
| local hour | 5-7 or 16-18: 20, 4-8 or 15-19: 10 |
| location elevation | <500 m 15, <1000 m 10, <1500 m 5 |
| diamond | +5 |
"""

from __future__ import annotations

import calendar
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone, tzinfo

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fuji_calendar.config import get_settings
from fuji_calendar.database.models import Location as LocationRecord
from fuji_calendar.database.models import LocationEvent
from fuji_calendar.models.event import (
    Accuracy,
    CalendarEvent,
    CalendarResponse,
    CalendarStats,
    EventType,
    FujiEvent,
    LocationEventsResponse,
    MonthlyStats,
)
from fuji_calendar.models.location import Location

logger = logging.getLogger(__name__)

UPCOMING_DAYS = 30
BEST_SHOT_LIMIT = 10
SHOOTING_PLAN_LIMIT = 20

BEST_SHOT_ACCURACIES = (Accuracy.PERFECT, Accuracy.EXCELLENT, Accuracy.GOOD)

ACCURACY_POINTS = {
    Accuracy.PERFECT: 50,
    Accuracy.EXCELLENT: 40,
    Accuracy.GOOD: 30,
    Accuracy.FAIR: 20,
}


class LocationNotFoundError(Exception):
    """Raised when a location id does not exist."""

    def __init__(self, location_id: int):
        super().__init__(f"Location not found: {location_id}")
        self.location_id = location_id


def calendar_grid_range(year: int, month: int) -> tuple[date, date]:
    """Return the first and last date shown on a Sunday-first month grid."""
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])

    # date.weekday() is Monday=0; the grid starts on Sunday
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    end = last + timedelta(days=6 - (last.weekday() + 1) % 7)
    return start, end


def _as_aware(value: datetime) -> datetime:
    # SQLite returns naive datetimes; rows are written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_fuji_event(record: LocationEvent, location: Location | None = None) -> FujiEvent:
    """Convert a stored event row to the API model.

    Args:
        record: Stored event, with its location loaded
        location: Already converted location, to share between events
    """
    event_type, sub_type = record.event_type.to_public()
    if location is None:
        location = Location.model_validate(record.location)

    return FujiEvent(
        id=f"{record.event_type.value}-{record.location_id}-{record.event_date.isoformat()}",
        type=event_type,
        sub_type=sub_type,
        event_date=record.event_date,
        time=_as_aware(record.event_time),
        location=location,
        azimuth=record.azimuth,
        elevation=record.altitude,
        quality_score=record.quality_score,
        accuracy=record.accuracy,
        moon_phase=record.moon_phase,
        moon_illumination=record.moon_illumination,
    )


def group_events_by_date(events: list[FujiEvent]) -> list[CalendarEvent]:
    """Group events into calendar days, ordered by date."""
    by_date: dict[date, list[FujiEvent]] = defaultdict(list)
    for event in events:
        by_date[event.event_date].append(event)

    return [
        CalendarEvent.from_events(day, day_events)
        for day, day_events in sorted(by_date.items())
    ]


def calculate_event_score(event: FujiEvent, tz: tzinfo) -> float:
    """Composite shooting score; higher is better."""
    score = 0.0

    if event.quality_score:
        score += event.quality_score * 100

    if event.accuracy:
        score += ACCURACY_POINTS.get(event.accuracy, 0)

    # Bodies just above the horizon photograph best
    if event.elevation:
        if 2 <= event.elevation <= 10:
            score += 30
        elif 1 <= event.elevation <= 15:
            score += 20
        elif event.elevation > 0:
            score += 10

    hour = event.time.astimezone(tz).hour
    if 5 <= hour <= 7 or 16 <= hour <= 18:
        score += 20
    elif 4 <= hour <= 8 or 15 <= hour <= 19:
        score += 10

    # Lower locations are easier to reach
    if event.location.elevation < 500:
        score += 15
    elif event.location.elevation < 1000:
        score += 10
    elif event.location.elevation < 1500:
        score += 5

    if event.type == EventType.DIAMOND:
        score += 5

    return score


class CalendarService:
    """Read-side service for calendar, event and location queries.

    Example:
        ```python
        async with get_db() as session:
            service = CalendarService(session)
            calendar = await service.get_monthly_calendar(2025, 6)
            best = await service.get_best_shot_days(2025, 6)
        ```
    """

    def __init__(
        self,
        db: AsyncSession,
        timezone: tzinfo | None = None,
        now: datetime | None = None,
    ):
        """Initialize the service.

        Args:
            db: Database session
            timezone: Timezone of stored event dates. Defaults to settings.
            now: Fixed current time, for tests
        """
        self.db = db
        self.tz = timezone or get_settings().tzinfo
        self._now = now

    def now(self) -> datetime:
        return self._now or datetime.now(timezone.utc)

    async def _fetch_events(self, *conditions) -> list[FujiEvent]:
        result = await self.db.execute(
            select(LocationEvent)
            .options(selectinload(LocationEvent.location))
            .where(*conditions)
            .order_by(LocationEvent.event_time, LocationEvent.id)
        )
        records = result.scalars().all()

        locations: dict[int, Location] = {}
        events = []
        for record in records:
            if record.location_id not in locations:
                locations[record.location_id] = Location.model_validate(record.location)
            events.append(to_fuji_event(record, locations[record.location_id]))
        return events

    async def get_monthly_calendar(self, year: int, month: int) -> CalendarResponse:
        """Get the month's calendar grid, grouped by day."""
        start, end = calendar_grid_range(year, month)
        logger.debug(f"Fetching calendar {year}-{month:02d} ({start} to {end})")

        events = await self._fetch_events(
            LocationEvent.event_date >= start,
            LocationEvent.event_date <= end,
        )
        days = group_events_by_date(events)

        logger.info(
            f"Calendar {year}-{month:02d}: {len(events)} events on {len(days)} days"
        )
        return CalendarResponse(year=year, month=month, events=days)

    async def get_day_events(self, target_date: date) -> list[FujiEvent]:
        """Get one day's events ordered by time."""
        events = await self._fetch_events(LocationEvent.event_date == target_date)
        logger.debug(f"{len(events)} events on {target_date}")
        return events

    async def get_upcoming_events(self, limit: int = 50) -> list[FujiEvent]:
        """Get events after now, up to 30 days ahead."""
        now = self.now().astimezone(timezone.utc)
        today = now.astimezone(self.tz).date()
        window_end = now + timedelta(days=UPCOMING_DAYS)

        events = await self._fetch_events(
            LocationEvent.event_date >= today,
            LocationEvent.event_date <= window_end.astimezone(self.tz).date(),
        )
        upcoming = [e for e in events if now < e.time <= window_end]
        return upcoming[:limit]

    async def get_best_shot_days(self, year: int, month: int) -> list[FujiEvent]:
        """Get the month's best events by shooting score."""
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])

        events = await self._fetch_events(
            LocationEvent.event_date >= first,
            LocationEvent.event_date <= last,
            LocationEvent.accuracy.in_(BEST_SHOT_ACCURACIES),
        )
        ranked = sorted(
            events,
            key=lambda e: calculate_event_score(e, self.tz),
            reverse=True,
        )
        return ranked[:BEST_SHOT_LIMIT]

    async def get_suggested_shooting_plan(
        self,
        start_date: date,
        end_date: date,
        preferred_type: EventType | None = None,
    ) -> list[FujiEvent]:
        """Get the best events of a date range, optionally of one type."""
        events = await self._fetch_events(
            LocationEvent.event_date >= start_date,
            LocationEvent.event_date <= end_date,
        )
        if preferred_type is not None:
            events = [e for e in events if e.type == preferred_type]

        ranked = sorted(
            events,
            key=lambda e: calculate_event_score(e, self.tz),
            reverse=True,
        )
        return ranked[:SHOOTING_PLAN_LIMIT]

    async def get_location(self, location_id: int) -> Location:
        """Get a location by id.

        Raises:
            LocationNotFoundError: If no such location exists
        """
        record = await self.db.get(LocationRecord, location_id)
        if record is None:
            raise LocationNotFoundError(location_id)
        return Location.model_validate(record)

    async def get_location_yearly_events(
        self,
        location_id: int,
        year: int,
    ) -> LocationEventsResponse:
        """Get a location together with all of its events in a year.

        Raises:
            LocationNotFoundError: If no such location exists
        """
        location = await self.get_location(location_id)

        result = await self.db.execute(
            select(LocationEvent)
            .where(
                LocationEvent.location_id == location_id,
                LocationEvent.event_date >= date(year, 1, 1),
                LocationEvent.event_date <= date(year, 12, 31),
            )
            .order_by(LocationEvent.event_time, LocationEvent.id)
        )
        events = [to_fuji_event(record, location) for record in result.scalars().all()]
        return LocationEventsResponse(location=location, year=year, events=events)

    async def get_calendar_stats(self, year: int) -> CalendarStats:
        """Count a year's events, in total and per month."""
        first = date(year, 1, 1)
        last = date(year, 12, 31)

        result = await self.db.execute(
            select(LocationEvent.event_date, LocationEvent.event_type).where(
                LocationEvent.event_date >= first,
                LocationEvent.event_date <= last,
            )
        )

        months = {month: MonthlyStats(month=month) for month in range(1, 13)}
        for event_date, stored_type in result.all():
            monthly = months[event_date.month]
            monthly.total_events += 1
            event_type, _ = stored_type.to_public()
            if event_type == EventType.DIAMOND:
                monthly.diamond_events += 1
            else:
                monthly.pearl_events += 1

        active_locations = await self.db.scalar(
            select(func.count(distinct(LocationEvent.location_id))).where(
                LocationEvent.event_date >= first,
                LocationEvent.event_date <= last,
            )
        )

        breakdown = list(months.values())
        return CalendarStats(
            year=year,
            total_events=sum(m.total_events for m in breakdown),
            diamond_events=sum(m.diamond_events for m in breakdown),
            pearl_events=sum(m.pearl_events for m in breakdown),
            active_locations=active_locations or 0,
            monthly_breakdown=breakdown,
        )

    async def get_locations(self) -> list[Location]:
        """Get all locations ordered by prefecture and name."""
        result = await self.db.execute(
            select(LocationRecord).order_by(LocationRecord.prefecture, LocationRecord.name)
        )
        return [Location.model_validate(record) for record in result.scalars().all()]
