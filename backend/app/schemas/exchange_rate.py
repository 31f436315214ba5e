"""
Pydantic schemas for ExchangeRate entity.
"""
from pydantic import BaseModel
from app.schemas.types import Money


class ExchangeRateCreate(BaseModel):
    """Schema for exchange rate creation. The effective date is set by the database."""
    currency: int  # Currency catalog id
    rate: Money


class ExchangeRateUpdate(BaseModel):
    """Schema for exchange rate update."""
    rate: Money


class ExchangeRateCreated(BaseModel):
    """Schema for exchange rate creation response."""
    id: int
