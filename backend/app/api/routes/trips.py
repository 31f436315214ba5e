"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, status
from typing import Optional
from app.api.dependencies import get_current_user, get_trip_service
from app.core.utils import format_response
from app.schemas.trip import TripCreate, TripUpdate
from app.services.trip_service import TripService

router = APIRouter(prefix="/trips", tags=["trips"], dependencies=[Depends(get_current_user)])


@router.get("")
def list_trips(
    filter: Optional[str] = None,
    limit: Optional[int] = None,
    page: int = 1,
    month: Optional[int] = None,
    year: Optional[int] = None,
    trip_service: TripService = Depends(get_trip_service),
):
    """List trips, optionally filtered by surname or id and by month/year."""
    result = trip_service.list_trips(filter=filter, limit=limit, page=page, month=month, year=year)
    return format_response(
        data=result.items,
        message="Trips retrieved",
        pagination=result.pagination,
    )


@router.get("/{trip_id}")
def get_trip(trip_id: str, trip_service: TripService = Depends(get_trip_service)):
    """Get trip details with its attached services."""
    return format_response(data=trip_service.get_trip(trip_id), message="Trip retrieved")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_trip(trip_data: TripCreate, trip_service: TripService = Depends(get_trip_service)):
    """Create a trip together with its services."""
    return format_response(data=trip_service.create_trip(trip_data), message="Trip created")


@router.patch("/{trip_id}")
def update_trip(
    trip_id: str,
    changes: TripUpdate,
    trip_service: TripService = Depends(get_trip_service),
):
    return format_response(data=trip_service.update_trip(trip_id, changes), message="Trip updated")


@router.delete("/{trip_id}")
def delete_trip(trip_id: str, trip_service: TripService = Depends(get_trip_service)):
    """Delete a trip. Attached services are removed with it."""
    return format_response(data=trip_service.delete_trip(trip_id), message="Trip deleted")
