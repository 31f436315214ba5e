"""
Service catalog and attached-service operations.
"""
import logging
from typing import List

from app.core.config import Settings
from app.core.errors import InvalidInputError, NotFoundError
from app.db.transaction import TransactionManager
from app.repositories.service_repository import ServiceRepository
from app.schemas.service import AttachedServiceCreate, AttachedServiceUpdate, ServiceCatalogEntry
from app.services.trip_service import normalize_payer
from app.services.validation import validate_service_fields

logger = logging.getLogger(__name__)


class ServicesService:
    def __init__(
        self,
        service_repository: ServiceRepository,
        transactions: TransactionManager,
        settings: Settings,
    ):
        self._services = service_repository
        self._transactions = transactions
        self._settings = settings

    def list_service_catalog(self) -> List[ServiceCatalogEntry]:
        return self._services.list_catalog()

    def attach_service(self, line: AttachedServiceCreate) -> None:
        """Attach one service to an existing trip."""
        if not line.trip_id or not line.trip_id.strip():
            raise InvalidInputError("Trip id is required")
        validate_service_fields(
            line.service_id,
            line.amount,
            line.paid_by,
            line.currency,
            line.exchange_rate,
            self._settings.PAYERS,
        )
        logger.info(f"Attaching service {line.service_id} to trip {line.trip_id}")
        self._transactions.execute(
            lambda conn: self._services.create_for_trip(
                line.trip_id.strip(),
                line.service_id,
                line.amount,
                normalize_payer(line.paid_by),
                line.currency,
                line.exchange_rate,
                conn=conn,
            )
        )

    def update_attached_service(
        self, trip_id: str, service_id: int, changes: AttachedServiceUpdate
    ) -> None:
        validate_service_fields(
            service_id,
            changes.amount,
            changes.paid_by,
            changes.currency,
            changes.exchange_rate,
            self._settings.PAYERS,
        )
        logger.info(f"Updating service {service_id} of trip {trip_id}")
        affected = self._transactions.execute(
            lambda conn: self._services.update_for_trip(
                trip_id,
                service_id,
                changes.amount,
                normalize_payer(changes.paid_by),
                changes.currency,
                changes.exchange_rate,
                conn=conn,
            )
        )
        if affected == 0:
            raise NotFoundError(f"Service {service_id} is not attached to trip {trip_id}")

    def detach_service(self, trip_id: str, service_id: int) -> None:
        logger.info(f"Detaching service {service_id} from trip {trip_id}")
        affected = self._transactions.execute(
            lambda conn: self._services.delete_for_trip(trip_id, service_id, conn=conn)
        )
        if affected == 0:
            raise NotFoundError(f"Service {service_id} is not attached to trip {trip_id}")
