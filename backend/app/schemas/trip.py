"""
Pydantic schemas for Trip entity.

Response models read the column names returned by the stored procedures
(``apellido``, ``fecha_ida``...) and serialize with the API field names.
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import date
from app.schemas.types import Money
import enum
import json


class Destination(str, enum.Enum):
    """Trip destination category."""
    DOMESTIC = "nacional"
    INTERNATIONAL = "internacional"


class TripStatus(str, enum.Enum):
    """Trip lifecycle status, owned by the database."""
    PENDING = "pendiente"
    FINISHED = "finalizado"


class ServiceLine(BaseModel):
    """A service attached while creating a trip."""
    service_id: int
    amount: Money
    paid_by: str
    currency: int
    exchange_rate: Optional[Money] = None


class ServiceLineUpdate(BaseModel):
    """A change to an attached service sent along with a trip update."""
    service_id: int
    amount: Optional[Money] = None
    paid_by: Optional[str] = None
    currency: Optional[int] = None
    exchange_rate: Optional[Money] = None


class TripBase(BaseModel):
    """Base trip schema."""
    surname: str
    total_value: Money
    destination: Destination
    departure_date: date
    return_date: date
    currency: int  # Currency catalog id
    exchange_rate: Optional[Money] = None  # Rate snapshot at creation


class TripCreate(TripBase):
    """Schema for trip creation."""
    services: List[ServiceLine] = []


class TripUpdate(BaseModel):
    """Schema for trip update. Omitted fields keep their stored value."""
    surname: Optional[str] = None
    total_value: Optional[Money] = None
    destination: Optional[Destination] = None
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    currency: Optional[int] = None
    exchange_rate: Optional[Money] = None
    services: Optional[List[ServiceLineUpdate]] = None


class TripServiceResponse(BaseModel):
    """Service as embedded in a trip row."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    service_id: int = Field(validation_alias=AliasChoices("service_id", "id"))
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "nombre"))
    amount: Money = Field(validation_alias=AliasChoices("amount", "valor"))
    paid_by: Optional[str] = Field(default=None, validation_alias=AliasChoices("paid_by", "pagado_por"))
    currency: Optional[str] = Field(default=None, validation_alias=AliasChoices("currency", "moneda"))
    exchange_rate: Optional[Money] = Field(
        default=None, validation_alias=AliasChoices("exchange_rate", "valor_tasa_cambio")
    )


class TripResponse(BaseModel):
    """Schema for trip response."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    surname: str = Field(validation_alias=AliasChoices("surname", "apellido"))
    total_value: Money = Field(validation_alias=AliasChoices("total_value", "valor_total"))
    destination: str = Field(validation_alias=AliasChoices("destination", "destino"))
    departure_date: date = Field(validation_alias=AliasChoices("departure_date", "fecha_ida"))
    return_date: date = Field(validation_alias=AliasChoices("return_date", "fecha_vuelta"))
    currency: Optional[str] = Field(default=None, validation_alias=AliasChoices("currency", "moneda"))
    status: Optional[str] = Field(default=None, validation_alias=AliasChoices("status", "estado"))
    cost: Optional[Money] = Field(default=None, validation_alias=AliasChoices("cost", "costo"))
    profit: Optional[Money] = Field(default=None, validation_alias=AliasChoices("profit", "ganancia"))
    exchange_rate: Optional[Money] = Field(
        default=None, validation_alias=AliasChoices("exchange_rate", "valor_tasa_cambio", "cotizacion")
    )
    services: List[TripServiceResponse] = Field(
        default_factory=list, validation_alias=AliasChoices("services", "servicios")
    )

    @field_validator("services", mode="before")
    @classmethod
    def parse_services(cls, v):
        """Services arrive as a JSON array built by the procedure."""
        if v is None:
            return []
        if isinstance(v, (str, bytes)):
            v = json.loads(v)
        # A trip without services aggregates to a single all-null object
        return [item for item in v if not (isinstance(item, dict) and item.get("id") is None
                                           and item.get("service_id") is None)]
