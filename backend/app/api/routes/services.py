"""
Service catalog and attached-service routes.
"""
from fastapi import APIRouter, Depends, status
from app.api.dependencies import get_current_user, get_services_service
from app.core.utils import format_response
from app.schemas.service import AttachedServiceCreate, AttachedServiceUpdate
from app.services.services_service import ServicesService

router = APIRouter(prefix="/services", tags=["services"], dependencies=[Depends(get_current_user)])


@router.get("")
def list_service_catalog(services: ServicesService = Depends(get_services_service)):
    """List the service types that can be attached to a trip."""
    return format_response(data=services.list_service_catalog(), message="Services retrieved")


@router.post("", status_code=status.HTTP_201_CREATED)
def attach_service(
    line: AttachedServiceCreate,
    services: ServicesService = Depends(get_services_service),
):
    services.attach_service(line)
    return format_response(message="Service attached to trip")


@router.patch("/{service_id}/trip/{trip_id}")
def update_attached_service(
    service_id: int,
    trip_id: str,
    changes: AttachedServiceUpdate,
    services: ServicesService = Depends(get_services_service),
):
    services.update_attached_service(trip_id, service_id, changes)
    return format_response(message="Service updated")


@router.delete("/{service_id}/trip/{trip_id}")
def detach_service(
    service_id: int,
    trip_id: str,
    services: ServicesService = Depends(get_services_service),
):
    services.detach_service(trip_id, service_id)
    return format_response(message="Service removed from trip")
