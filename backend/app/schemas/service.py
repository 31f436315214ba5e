"""
Pydantic schemas for the service catalog and services attached to trips.
"""
from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from app.schemas.types import Money


class ServiceCatalogEntry(BaseModel):
    """Service type available to attach to trips."""
    id: int
    name: str = Field(validation_alias=AliasChoices("name", "nombre"))


class AttachedServiceCreate(BaseModel):
    """Schema for attaching a service to an existing trip."""
    trip_id: str
    service_id: int
    amount: Money
    paid_by: str
    currency: int
    exchange_rate: Optional[Money] = None


class AttachedServiceUpdate(BaseModel):
    """Schema for updating an attached service. Omitted fields are kept."""
    amount: Optional[Money] = None
    paid_by: Optional[str] = None
    currency: Optional[int] = None
    exchange_rate: Optional[Money] = None
