"""Day/month data aggregator.

Keeps a calendar view-state in step with the API for the displayed month
and the selected day.

## Load Sequence

1. Month: fetch the calendar for (year, month)
2. Day: fetch the events of the selected date
3. Weather: only after a successful day fetch, and only when the date is
   between today and `weather_window_days` ahead (inclusive)

## Failure Handling

| Step | On failure |
|------|------------|
| month | `error` set, previous `calendar_data` kept |
| day | `day_events` emptied, `weather` cleared, `error` untouched |
| weather | `weather` cleared, logged as a warning only |

Failures never propagate out of the load methods.

## Overlapping Loads

Every month or day load takes the next sequence number for its kind.
When it resumes, a load whose number is no longer the latest discards its
result, so the most recently issued load always wins. Only the latest
month load clears `loading`.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, tzinfo
from typing import Any, Callable, Union
from zoneinfo import ZoneInfo

from fuji_calendar.client.api_client import CalendarApiClient, get_error_message
from fuji_calendar.config import get_settings
from fuji_calendar.models.event import CalendarResponse, FujiEvent
from fuji_calendar.models.weather import WeatherInfo

module_logger = logging.getLogger(__name__)

MONTH_ERROR_PREFIX = "カレンダーデータの取得に失敗しました"

DateInput = Union[date, datetime, str]
Listener = Callable[["CalendarViewState"], None]


@dataclass
class CalendarViewState:
    """Snapshot of everything a calendar view renders."""

    calendar_data: CalendarResponse | None = None
    day_events: list[FujiEvent] = field(default_factory=list)
    weather: WeatherInfo | None = None
    loading: bool = False
    error: str | None = None


def normalize_date(value: DateInput, tz: tzinfo) -> date:
    """Reduce a date-like value to a calendar date in `tz`.

    Aware datetimes are converted to `tz` first; naive ones are taken as
    already local. Strings may be ISO dates or ISO datetimes.

    Raises:
        ValueError: If a string is not an ISO date or datetime
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()

    return value


class AstronomicalEventsAggregator:
    """Aggregates month, day and weather data for a calendar view.

    Example:
        ```python
        async with CalendarApiClient() as client:
            aggregator = AstronomicalEventsAggregator(
                client, 2025, 6, selected_date="2025-06-10"
            )
            await aggregator.start()
            print(aggregator.state.day_events)

            await aggregator.select_date("2025-06-11")
            await aggregator.refresh()
        ```
    """

    def __init__(
        self,
        client: CalendarApiClient,
        year: int,
        month: int,
        selected_date: DateInput | None = None,
        *,
        logger: logging.Logger | None = None,
        timezone: str | tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
        weather_window_days: int | None = None,
    ):
        """Initialize the aggregator.

        Args:
            client: API client (anything with the same three fetch methods)
            year: Displayed year
            month: Displayed month (1-12)
            selected_date: Initially selected date, if any
            logger: Logger for fetch diagnostics. Defaults to this module's.
            timezone: Viewer timezone for "today" and date normalization.
                Defaults to settings.timezone.
            clock: Returns the current time. Defaults to `datetime.now`.
            weather_window_days: Last day offset with weather.
                Defaults to settings.weather_window_days.
        """
        settings = get_settings()

        if timezone is None:
            timezone = settings.tzinfo
        elif isinstance(timezone, str):
            timezone = ZoneInfo(timezone)

        self._client = client
        self._logger = logger or module_logger
        self.tz: tzinfo = timezone
        self._clock = clock or (lambda: datetime.now(self.tz))
        self.weather_window_days = (
            weather_window_days
            if weather_window_days is not None
            else settings.weather_window_days
        )

        self.year = year
        self.month = month
        self.selected_date = (
            normalize_date(selected_date, self.tz) if selected_date is not None else None
        )

        self._state = CalendarViewState()
        self._listeners: list[Listener] = []
        self._month_seq = 0
        self._day_seq = 0

    @property
    def state(self) -> CalendarViewState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with the new state after every change.

        Listeners are called synchronously from inside the loads.

        Returns:
            Function that removes the listener again

        Raises:
            TypeError: If `listener` is a coroutine function
        """
        if inspect.iscoroutinefunction(listener):
            raise TypeError("View-state listeners must be synchronous callables")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def today(self) -> date:
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(self.tz)
        return now.date()

    def _update(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                self._logger.exception("View-state listener failed")

    async def load_month(self, year: int | None = None, month: int | None = None) -> None:
        """Fetch the calendar for a month.

        Args:
            year: Year to load. Defaults to the displayed year.
            month: Month to load. Defaults to the displayed month.
        """
        year = self.year if year is None else year
        month = self.month if month is None else month

        self._month_seq += 1
        seq = self._month_seq

        self._update(loading=True, error=None)
        self._logger.debug(f"Fetching calendar for {year}-{month:02d}")

        try:
            data = await self._client.get_monthly_calendar(year, month)
        except Exception as e:
            if seq == self._month_seq:
                message = get_error_message(e)
                self._logger.error(f"Failed to fetch calendar for {year}-{month:02d}: {message}")
                self._update(error=f"{MONTH_ERROR_PREFIX}: {message}")
            else:
                self._logger.debug(f"Discarding failure of superseded month load #{seq}")
        else:
            if seq == self._month_seq:
                self._logger.info(
                    f"Loaded calendar for {year}-{month:02d}: {len(data.events)} days with events"
                )
                self._update(calendar_data=data)
            else:
                self._logger.debug(f"Discarding result of superseded month load #{seq}")
        finally:
            if seq == self._month_seq:
                self._update(loading=False)

    async def load_day(self, value: DateInput) -> None:
        """Fetch the events of a day, then its weather when in the window.

        Raises:
            ValueError: If `value` is not a valid date
        """
        target = normalize_date(value, self.tz)
        date_str = target.isoformat()

        self._day_seq += 1
        seq = self._day_seq

        self._logger.debug(f"Fetching events for {date_str}")

        try:
            response = await self._client.get_day_events(date_str)
        except Exception as e:
            if seq != self._day_seq:
                return
            self._logger.error(f"Failed to fetch events for {date_str}: {get_error_message(e)}")
            self._update(day_events=[], weather=None)
            return

        if seq != self._day_seq:
            self._logger.debug(f"Discarding result of superseded day load #{seq}")
            return

        events = list(response.events or [])
        self._logger.info(f"Loaded {len(events)} events for {date_str}")
        self._update(day_events=events)

        await self._load_weather(target, seq)

    async def _load_weather(self, target: date, seq: int) -> None:
        days_ahead = (target - self.today()).days
        if not 0 <= days_ahead <= self.weather_window_days:
            self._update(weather=None)
            return

        date_str = target.isoformat()
        try:
            weather = await self._client.get_weather(date_str)
        except Exception as e:
            if seq == self._day_seq:
                self._logger.warning(
                    f"Failed to fetch weather for {date_str}: {get_error_message(e)}"
                )
                self._update(weather=None)
            return

        if seq == self._day_seq:
            self._update(weather=weather)

    async def refresh(self) -> None:
        """Reload the displayed month, then the selected day if any."""
        await self.load_month()
        if self.selected_date is not None:
            await self.load_day(self.selected_date)

    async def set_period(self, year: int, month: int) -> None:
        """Change the displayed month, reloading it if it changed."""
        if (year, month) == (self.year, self.month):
            return
        self.year = year
        self.month = month
        await self.load_month()

    async def select_date(self, value: DateInput | None) -> None:
        """Change the selected date.

        Selecting a different date loads it. Selecting None clears the day
        state without any request and drops in-flight day loads.
        """
        if value is None:
            self.selected_date = None
            self._day_seq += 1
            self._update(day_events=[], weather=None)
            return

        target = normalize_date(value, self.tz)
        if target == self.selected_date:
            return
        self.selected_date = target
        await self.load_day(target)

    async def start(self) -> None:
        """Run the initial month and day loads."""
        loads = [self.load_month()]
        if self.selected_date is not None:
            loads.append(self.load_day(self.selected_date))
        await asyncio.gather(*loads)
