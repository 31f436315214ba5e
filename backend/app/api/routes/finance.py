"""
Finance summary and exchange rate routes.
"""
from fastapi import APIRouter, Depends, status
from typing import Optional
from app.api.dependencies import get_current_user, get_finance_service
from app.core.utils import format_response
from app.schemas.exchange_rate import ExchangeRateCreate, ExchangeRateCreated, ExchangeRateUpdate
from app.services.finance_service import FinanceService

router = APIRouter(prefix="/finance", tags=["finance"], dependencies=[Depends(get_current_user)])


@router.get("")
def finance_summary(
    year: int,
    month: Optional[int] = None,
    currency: Optional[int] = None,
    finance: FinanceService = Depends(get_finance_service),
):
    """Monthly income, expense and profit per currency."""
    summary = finance.finance_summary(year=year, month=month, currency=currency)
    return format_response(data=summary, message="Finance summary retrieved")


@router.post("/exchange-rates", status_code=status.HTTP_201_CREATED)
def create_exchange_rate(
    rate_data: ExchangeRateCreate,
    finance: FinanceService = Depends(get_finance_service),
):
    rate_id = finance.create_exchange_rate(rate_data.currency, rate_data.rate)
    return format_response(data=ExchangeRateCreated(id=rate_id), message="Exchange rate created")


@router.patch("/exchange-rates/{rate_id}")
def update_exchange_rate(
    rate_id: int,
    rate_data: ExchangeRateUpdate,
    finance: FinanceService = Depends(get_finance_service),
):
    finance.update_exchange_rate(rate_id, rate_data.rate)
    return format_response(message="Exchange rate updated")
