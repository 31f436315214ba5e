"""
Trip repository backed by the trip stored procedures.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import ValidationError
from sqlalchemy.engine import Connection

from app.core.errors import InfrastructureError
from app.db.query_executor import QueryExecutor
from app.schemas.trip import TripBase, TripResponse, TripUpdate

logger = logging.getLogger(__name__)

# Passed for every field a caller did not set; the procedures keep the
# stored value for NULL parameters (IFNULL(p_x, x)).
NO_CHANGE = None


@dataclass
class TripPage:
    """One page of trips plus the total number of matching trips."""
    items: List[TripResponse] = field(default_factory=list)
    total: int = 0


def find_total(result_sets: List[List[dict]]) -> int:
    """
    Locate the total count among the result sets of a paged query.

    The count set is recognised by its content (a first row exposing
    ``total``), not by position, since the procedure does not keep its result
    sets in a fixed order. Returns 0 when no such set exists.
    """
    for result_set in result_sets:
        if result_set and isinstance(result_set[0], dict) and "total" in result_set[0]:
            return int(result_set[0]["total"] or 0)
    return 0


def _is_trip_rows(result_set: List[dict]) -> bool:
    return bool(result_set) and isinstance(result_set[0], dict) and "total" not in result_set[0]


class TripRepository:
    """Translates trip operations into stored procedure calls."""

    def __init__(self, executor: QueryExecutor):
        self._executor = executor

    def list(
        self,
        filter: Optional[str],
        limit: int,
        offset: int,
        month: Optional[int],
        year: Optional[int],
        conn: Optional[Connection] = None,
    ) -> TripPage:
        """
        Fetch one page of trips.

        A response that executed but cannot be parsed yields an empty page
        instead of an error so the list endpoint stays available; the anomaly
        is logged.
        """
        result_sets = self._executor.fetch_result_sets(
            "obtener_viajes", [filter, limit, offset, month, year], conn
        )
        try:
            rows = next((rs for rs in result_sets if _is_trip_rows(rs)), [])
            items = [TripResponse.model_validate(row) for row in rows]
            total = find_total(result_sets)
        except (ValidationError, ValueError, TypeError, KeyError) as exc:
            logger.warning(
                f"Discarding unparseable trip page (filter={filter!r}, limit={limit}, "
                f"offset={offset}, month={month}, year={year}, "
                f"result_sets={len(result_sets)}): {exc}"
            )
            return TripPage()
        return TripPage(items=items, total=total)

    def find_by_id(self, trip_id: str, conn: Optional[Connection] = None) -> Optional[TripResponse]:
        row = self._executor.fetch_one("obtener_viaje", [trip_id], allow_empty=True, conn=conn)
        if row is None:
            return None
        try:
            return TripResponse.model_validate(row)
        except ValidationError as exc:
            raise InfrastructureError("obtener_viaje returned a malformed trip") from exc

    def create(self, trip: TripBase, conn: Optional[Connection] = None) -> str:
        """Insert the trip row only; services are written separately."""
        row = self._executor.fetch_one(
            "insertar_viaje",
            [
                trip.surname,
                trip.total_value,
                trip.destination.value,
                trip.departure_date,
                trip.return_date,
                trip.currency,
                trip.exchange_rate,
            ],
            conn=conn,
        )
        return _returned_id(row, "insertar_viaje")

    def update(self, trip_id: str, changes: TripUpdate, conn: Optional[Connection] = None) -> str:
        row = self._executor.fetch_one(
            "actualizar_viaje",
            [
                trip_id,
                _or_no_change(changes.surname),
                _or_no_change(changes.total_value),
                _or_no_change(changes.destination.value if changes.destination else None),
                _or_no_change(changes.departure_date),
                _or_no_change(changes.return_date),
                _or_no_change(changes.currency),
                _or_no_change(changes.exchange_rate),
            ],
            conn=conn,
        )
        return _returned_id(row, "actualizar_viaje")

    def delete(self, trip_id: str, conn: Optional[Connection] = None) -> str:
        """Delete a trip; its services are removed by the database cascade."""
        row = self._executor.fetch_one("eliminar_viaje", [trip_id], conn=conn)
        return _returned_id(row, "eliminar_viaje")


def _or_no_change(value: Any) -> Any:
    return NO_CHANGE if value is None else value


def _returned_id(row: dict, procedure: str) -> str:
    if row.get("id") is None:
        raise InfrastructureError(f"{procedure} did not return the trip id")
    return str(row["id"])
