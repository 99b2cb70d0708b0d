"""Event routes."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from fuji_calendar.api.dependencies import get_calendar_service
from fuji_calendar.models.event import EventsResponse, UpcomingEventsResponse
from fuji_calendar.services.calendar import CalendarService

router = APIRouter()


@router.get("/upcoming", response_model=UpcomingEventsResponse)
async def get_upcoming_events(
    limit: int = Query(default=50, ge=1, le=500),
    service: CalendarService = Depends(get_calendar_service),
) -> UpcomingEventsResponse:
    """Events in the next 30 days, soonest first."""
    events = await service.get_upcoming_events(limit)
    return UpcomingEventsResponse(events=events)


@router.get("/{event_date}", response_model=EventsResponse)
async def get_day_events(
    event_date: date,
    service: CalendarService = Depends(get_calendar_service),
) -> EventsResponse:
    """All events of one day, ordered by time."""
    events = await service.get_day_events(event_date)
    return EventsResponse(event_date=event_date, events=events)
