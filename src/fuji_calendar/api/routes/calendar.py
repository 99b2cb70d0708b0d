"""Calendar routes.

Monthly calendar, best shots, suggestions, per-location years and yearly
statistics.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from fuji_calendar.api.dependencies import get_calendar_service
from fuji_calendar.models.event import (
    BestShotsResponse,
    CalendarResponse,
    CalendarStats,
    EventType,
    LocationEventsResponse,
    ShootingPlanResponse,
)
from fuji_calendar.services.calendar import CalendarService, LocationNotFoundError

router = APIRouter()

Year = Annotated[int, Path(ge=2000, le=2100)]
Month = Annotated[int, Path(ge=1, le=12)]


@router.get("/stats/{year}", response_model=CalendarStats)
async def get_calendar_stats(
    year: Year,
    service: CalendarService = Depends(get_calendar_service),
) -> CalendarStats:
    """Event counts for a year, in total and per month."""
    return await service.get_calendar_stats(year)


@router.get("/suggestions", response_model=ShootingPlanResponse)
async def get_shooting_plan(
    start: date = Query(..., description="First date (YYYY-MM-DD)"),
    end: date = Query(..., description="Last date (YYYY-MM-DD)"),
    event_type: EventType | None = Query(
        default=None, alias="type", description="Only this event type"
    ),
    service: CalendarService = Depends(get_calendar_service),
) -> ShootingPlanResponse:
    """Best-scoring events of a date range."""
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end must not be before start",
        )
    events = await service.get_suggested_shooting_plan(start, end, event_type)
    return ShootingPlanResponse(events=events)


@router.get("/location/{location_id}/{year}", response_model=LocationEventsResponse)
async def get_location_yearly_events(
    location_id: int,
    year: Year,
    service: CalendarService = Depends(get_calendar_service),
) -> LocationEventsResponse:
    """All events of one location in a year."""
    try:
        return await service.get_location_yearly_events(location_id, year)
    except LocationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{year}/{month}", response_model=CalendarResponse)
async def get_monthly_calendar(
    year: Year,
    month: Month,
    service: CalendarService = Depends(get_calendar_service),
) -> CalendarResponse:
    """Calendar days with events for the month's grid."""
    return await service.get_monthly_calendar(year, month)


@router.get("/{year}/{month}/best-shots", response_model=BestShotsResponse)
async def get_best_shot_days(
    year: Year,
    month: Month,
    service: CalendarService = Depends(get_calendar_service),
) -> BestShotsResponse:
    """Top events of the month by shooting score."""
    recommendations = await service.get_best_shot_days(year, month)
    return BestShotsResponse(recommendations=recommendations)
