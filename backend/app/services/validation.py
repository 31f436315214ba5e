"""
Domain validation shared by the orchestration services.

All checks run before any database call and raise InvalidInputError.
"""
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from app.core.errors import InvalidInputError


def validate_trip_dates(departure_date, return_date) -> None:
    """Both dates must be calendar dates and departure must precede return."""
    if not isinstance(departure_date, date):
        raise InvalidInputError("Invalid departure date")
    if not isinstance(return_date, date):
        raise InvalidInputError("Invalid return date")
    if departure_date >= return_date:
        raise InvalidInputError("Departure date must be before return date")


def validate_total_value(total_value: Optional[Decimal]) -> None:
    if total_value is not None and total_value < 0:
        raise InvalidInputError("Total value cannot be negative")


def validate_reference(value: Optional[int], label: str) -> None:
    """Catalog references (service types, currencies, rates) are positive ids."""
    if value is not None and value <= 0:
        raise InvalidInputError(f"Invalid {label} id: {value}")


def validate_amount(amount: Optional[Decimal], label: str = "Amount") -> None:
    if amount is not None and amount <= 0:
        raise InvalidInputError(f"{label} must be greater than 0")


def validate_payer(paid_by: Optional[str], payers: Iterable[str]) -> None:
    if paid_by is not None and paid_by.strip().lower() not in payers:
        raise InvalidInputError(f"Unknown payer: {paid_by}")


def validate_service_fields(
    service_id: Optional[int],
    amount: Optional[Decimal],
    paid_by: Optional[str],
    currency: Optional[int],
    exchange_rate: Optional[Decimal],
    payers: Iterable[str],
    position: Optional[int] = None,
) -> None:
    """
    Validate one service line. ``None`` means "not supplied" and is accepted,
    so the same check covers both creation (after required fields are checked
    by the caller) and partial updates.
    """
    try:
        validate_reference(service_id, "service")
        validate_amount(amount)
        validate_payer(paid_by, payers)
        validate_reference(currency, "currency")
        validate_amount(exchange_rate, "Exchange rate")
    except InvalidInputError as exc:
        if position is None:
            raise
        raise InvalidInputError(f"Service line {position}: {exc.message}") from exc


def validate_month(month: Optional[int]) -> None:
    if month is not None and not 1 <= month <= 12:
        raise InvalidInputError("Month must be a number between 1 and 12")


def validate_year(year: Optional[int], min_year: int) -> None:
    if year is not None and year < min_year:
        raise InvalidInputError(f"Year must be greater than or equal to {min_year}")
