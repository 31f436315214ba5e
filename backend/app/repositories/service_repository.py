"""
Repository for the service catalog and services attached to trips.
"""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.engine import Connection

from app.db.query_executor import QueryExecutor
from app.repositories.trip_repository import NO_CHANGE
from app.schemas.service import ServiceCatalogEntry


class ServiceRepository:
    """Translates attached-service operations into stored procedure calls."""

    def __init__(self, executor: QueryExecutor):
        self._executor = executor

    def list_catalog(self, conn: Optional[Connection] = None) -> List[ServiceCatalogEntry]:
        rows = self._executor.select(
            "SELECT id, nombre FROM servicio_tipo ORDER BY id",
            conn=conn,
            description="SELECT servicio_tipo",
        )
        return [ServiceCatalogEntry.model_validate(row) for row in rows]

    def create_for_trip(
        self,
        trip_id: str,
        service_id: int,
        amount: Decimal,
        paid_by: str,
        currency: int,
        exchange_rate: Optional[Decimal] = None,
        conn: Optional[Connection] = None,
    ) -> None:
        """Attach a service to a trip. ``amount`` must already be validated."""
        self._executor.execute_procedure(
            "insertar_servicio_viaje",
            [trip_id, service_id, amount, paid_by, currency, exchange_rate],
            conn,
        )

    def update_for_trip(
        self,
        trip_id: str,
        service_id: int,
        amount: Optional[Decimal] = None,
        paid_by: Optional[str] = None,
        currency: Optional[int] = None,
        exchange_rate: Optional[Decimal] = None,
        conn: Optional[Connection] = None,
    ) -> int:
        """Partially update the (trip, service) association; returns affected rows."""
        return self._executor.execute_procedure(
            "actualizar_servicio_viaje",
            [
                trip_id,
                service_id,
                NO_CHANGE if amount is None else amount,
                NO_CHANGE if paid_by is None else paid_by,
                NO_CHANGE if currency is None else currency,
                NO_CHANGE if exchange_rate is None else exchange_rate,
            ],
            conn,
        )

    def delete_for_trip(self, trip_id: str, service_id: int, conn: Optional[Connection] = None) -> int:
        """Detach a service; 0 affected rows means the association did not exist."""
        return self._executor.execute_procedure(
            "eliminar_servicio_viaje", [trip_id, service_id], conn
        )
