"""Location routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from fuji_calendar.api.dependencies import get_calendar_service
from fuji_calendar.models.location import Location, LocationsResponse
from fuji_calendar.services.calendar import CalendarService, LocationNotFoundError

router = APIRouter()


@router.get("", response_model=LocationsResponse)
async def list_locations(
    service: CalendarService = Depends(get_calendar_service),
) -> LocationsResponse:
    """All shooting locations, by prefecture and name."""
    return LocationsResponse(locations=await service.get_locations())


@router.get("/{location_id}", response_model=Location)
async def get_location(
    location_id: int,
    service: CalendarService = Depends(get_calendar_service),
) -> Location:
    try:
        return await service.get_location(location_id)
    except LocationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
