"""
Trip service for trip-related business logic.

Writes go through one transaction per request: the trip row first, then every
service line in input order on the same connection. Any failure rolls the
whole unit back.
"""
import logging
from typing import Dict, Optional

from sqlalchemy.engine import Connection

from app.core.config import Settings
from app.core.errors import InvalidInputError, NotFoundError
from app.core.utils import build_pagination, clamp, sanitize_string
from app.db.transaction import TransactionManager
from app.repositories.service_repository import ServiceRepository
from app.repositories.trip_repository import TripRepository
from app.schemas.pagination import Pagination, TripList
from app.schemas.trip import TripBase, TripCreate, TripResponse, TripUpdate
from app.services.validation import (
    validate_month,
    validate_service_fields,
    validate_total_value,
    validate_trip_dates,
    validate_year,
)

logger = logging.getLogger(__name__)


def normalize_payer(paid_by: Optional[str]) -> Optional[str]:
    return paid_by.strip().lower() if paid_by is not None else None


class TripService:
    def __init__(
        self,
        trip_repository: TripRepository,
        service_repository: ServiceRepository,
        transactions: TransactionManager,
        settings: Settings,
    ):
        self._trips = trip_repository
        self._services = service_repository
        self._transactions = transactions
        self._settings = settings

    # Read path

    def list_trips(
        self,
        filter: Optional[str] = None,
        limit: Optional[int] = None,
        page: int = 1,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> TripList:
        """Return one page of trips with pagination metadata."""
        settings = self._settings
        if limit is None:
            limit = settings.PAGINATION_DEFAULT_LIMIT
        limit = clamp(limit, settings.PAGINATION_MIN_LIMIT, settings.PAGINATION_MAX_LIMIT)
        page = max(page, 1)
        offset = (page - 1) * limit

        validate_month(month)
        validate_year(year, settings.TRIPS_MIN_YEAR)
        filter = sanitize_string(filter, settings.FILTER_MAX_LENGTH)

        logger.info(
            f"Fetching trips filter={filter!r} limit={limit} offset={offset} "
            f"month={month} year={year}"
        )
        result = self._trips.list(filter, limit, offset, month, year)

        pagination = Pagination(**build_pagination(page, limit, result.total))
        return TripList(items=result.items, pagination=pagination)

    def get_trip(self, trip_id: str) -> TripResponse:
        trip = self._trips.find_by_id(trip_id)
        if trip is None:
            raise NotFoundError(f"Trip {trip_id} not found")
        return trip

    # Write path

    def create_trip(self, data: TripCreate) -> Dict[str, str]:
        """Create a trip and all of its service lines atomically."""
        self._validate_create(data)
        trip_fields = TripBase(**data.model_dump(exclude={"services"}))

        logger.info(f"Creating trip surname={data.surname!r} services={len(data.services)}")

        def write(conn: Connection) -> str:
            trip_id = self._trips.create(trip_fields, conn=conn)
            for line in data.services:
                self._services.create_for_trip(
                    trip_id,
                    line.service_id,
                    line.amount,
                    normalize_payer(line.paid_by),
                    line.currency,
                    line.exchange_rate,
                    conn=conn,
                )
            return trip_id

        trip_id = self._transactions.execute_with_retry(write, self._settings.TX_MAX_ATTEMPTS)
        logger.info(f"Trip {trip_id} created")
        return {"id": trip_id}

    def update_trip(self, trip_id: str, changes: TripUpdate) -> Dict[str, str]:
        """
        Update trip fields and, optionally, attached services in one unit.

        Fields left out of ``changes`` keep their stored value. A service line
        that does not match an attached service aborts the whole update.
        """
        self._validate_update(changes)
        logger.info(f"Updating trip {trip_id}")

        def write(conn: Connection) -> str:
            updated_id = self._trips.update(trip_id, changes, conn=conn)
            for line in changes.services or []:
                affected = self._services.update_for_trip(
                    updated_id,
                    line.service_id,
                    line.amount,
                    normalize_payer(line.paid_by),
                    line.currency,
                    line.exchange_rate,
                    conn=conn,
                )
                if affected == 0:
                    raise NotFoundError(
                        f"Service {line.service_id} is not attached to trip {updated_id}"
                    )
            return updated_id

        updated_id = self._transactions.execute_with_retry(write, self._settings.TX_MAX_ATTEMPTS)
        logger.info(f"Trip {updated_id} updated")
        return {"id": updated_id}

    def delete_trip(self, trip_id: str) -> Dict[str, str]:
        logger.info(f"Deleting trip {trip_id}")
        deleted_id = self._transactions.execute(
            lambda conn: self._trips.delete(trip_id, conn=conn)
        )
        logger.info(f"Trip {deleted_id} deleted")
        return {"id": deleted_id}

    # Validation

    def _validate_create(self, data: TripCreate) -> None:
        validate_trip_dates(data.departure_date, data.return_date)
        validate_total_value(data.total_value)
        if not data.surname or not data.surname.strip():
            raise InvalidInputError("Surname is required")
        if data.currency <= 0:
            raise InvalidInputError(f"Invalid currency id: {data.currency}")
        if not data.services:
            raise InvalidInputError("A trip needs at least one service")
        for position, line in enumerate(data.services, start=1):
            validate_service_fields(
                line.service_id,
                line.amount,
                line.paid_by,
                line.currency,
                line.exchange_rate,
                self._settings.PAYERS,
                position=position,
            )
        if data.exchange_rate is not None and data.exchange_rate <= 0:
            raise InvalidInputError("Exchange rate must be greater than 0")

    def _validate_update(self, changes: TripUpdate) -> None:
        # A single date cannot be checked against the stored one without a read
        if changes.departure_date is not None and changes.return_date is not None:
            validate_trip_dates(changes.departure_date, changes.return_date)
        validate_total_value(changes.total_value)
        if changes.surname is not None and not changes.surname.strip():
            raise InvalidInputError("Surname cannot be empty")
        if changes.currency is not None and changes.currency <= 0:
            raise InvalidInputError(f"Invalid currency id: {changes.currency}")
        if changes.exchange_rate is not None and changes.exchange_rate <= 0:
            raise InvalidInputError("Exchange rate must be greater than 0")
        for position, line in enumerate(changes.services or [], start=1):
            validate_service_fields(
                line.service_id,
                line.amount,
                line.paid_by,
                line.currency,
                line.exchange_rate,
                self._settings.PAYERS,
                position=position,
            )
