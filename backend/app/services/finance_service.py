"""
Finance service: monthly income/expense/profit per currency and exchange rates.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from app.core.config import Settings
from app.core.errors import InfrastructureError, NotFoundError
from app.repositories.finance_repository import FinanceRepository
from app.schemas.finance import CurrencySummary, MonthSummary
from app.services.validation import validate_amount, validate_month, validate_reference, validate_year

logger = logging.getLogger(__name__)

# The engine runs with lc_time_names = es_ES
MONTH_NAMES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def group_by_month(rows: List[Dict[str, Any]]) -> List[MonthSummary]:
    """
    Group (month, currency) rows into month buckets.

    Rows are consumed in delivered order, so bucket order and the currency
    order inside each bucket are the engine's.
    """
    buckets: Dict[int, MonthSummary] = {}
    for row in rows:
        try:
            month_number = int(row["mes_num"])
            income = _decimal(row.get("ingreso"))
            expense = _decimal(row.get("egreso"))
            profit = row.get("ganancia")
            entry = CurrencySummary(
                currency=str(row["moneda"]),
                income=income,
                expense=expense,
                profit=_decimal(profit) if profit is not None else income - expense,
            )
        except (KeyError, ValueError, TypeError, ArithmeticError) as exc:
            raise InfrastructureError("resumen_financiero returned a malformed row") from exc

        bucket = buckets.get(month_number)
        if bucket is None:
            name = row.get("mes") or MONTH_NAMES[(month_number - 1) % 12]
            bucket = MonthSummary(month=name, month_number=month_number)
            buckets[month_number] = bucket
        bucket.summary.append(entry)
    return list(buckets.values())


class FinanceService:
    def __init__(self, finance_repository: FinanceRepository, settings: Settings):
        self._finance = finance_repository
        self._settings = settings

    def finance_summary(
        self, year: int, month: Optional[int] = None, currency: Optional[int] = None
    ) -> List[MonthSummary]:
        validate_year(year, self._settings.FINANCE_MIN_YEAR)
        validate_month(month)
        validate_reference(currency, "currency")
        rows = self._finance.summary(month, year, currency)
        logger.info(f"Finance summary year={year} month={month} currency={currency}: {len(rows)} rows")
        return group_by_month(rows)

    def create_exchange_rate(self, currency: int, rate: Decimal) -> int:
        validate_reference(currency, "currency")
        validate_amount(rate, "Exchange rate")
        rate_id = self._finance.create_exchange_rate(currency, rate)
        logger.info(f"Exchange rate {rate_id} created for currency {currency}")
        return rate_id

    def update_exchange_rate(self, rate_id: int, rate: Decimal) -> None:
        validate_reference(rate_id, "exchange rate")
        validate_amount(rate, "Exchange rate")
        if self._finance.update_exchange_rate(rate_id, rate) == 0:
            raise NotFoundError(f"Exchange rate {rate_id} not found")
        logger.info(f"Exchange rate {rate_id} updated")
