"""
Repository for finance aggregation and exchange rates.
"""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.engine import Connection

from app.db.query_executor import QueryExecutor, Row


class FinanceRepository:
    def __init__(self, executor: QueryExecutor):
        self._executor = executor

    def summary(
        self,
        month: Optional[int],
        year: int,
        currency: Optional[int],
        conn: Optional[Connection] = None,
    ) -> List[Row]:
        """Rows already grouped by (month, currency) by ``resumen_financiero``."""
        return self._executor.fetch_all("resumen_financiero", [month, year, currency], conn)

    def create_exchange_rate(
        self, currency: int, rate: Decimal, conn: Optional[Connection] = None
    ) -> int:
        return self._executor.insert(
            "INSERT INTO tipo_cambio (fecha, moneda_id, valor_base) "
            "VALUES (NOW(), :currency, :rate)",
            {"currency": currency, "rate": rate},
            conn,
            description="INSERT tipo_cambio",
        )

    def update_exchange_rate(
        self, rate_id: int, rate: Decimal, conn: Optional[Connection] = None
    ) -> int:
        return self._executor.update(
            "UPDATE tipo_cambio SET valor_base = :rate WHERE id = :rate_id",
            {"rate": rate, "rate_id": rate_id},
            conn,
            description="UPDATE tipo_cambio",
        )
