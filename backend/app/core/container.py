"""
Application object graph.

Everything is built once per process by ``build_container`` and handed to
``create_app``; routes reach it through ``request.app.state.container``.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from app.core.config import Settings
from app.db.query_executor import QueryExecutor
from app.db.session import create_db_engine
from app.db.transaction import TransactionManager
from app.repositories.finance_repository import FinanceRepository
from app.repositories.service_repository import ServiceRepository
from app.repositories.trip_repository import TripRepository
from app.services.finance_service import FinanceService
from app.services.services_service import ServicesService
from app.services.trip_service import TripService


@dataclass
class Container:
    settings: Settings
    trip_service: TripService
    services_service: ServicesService
    finance_service: FinanceService
    engine: Optional[Engine] = None


def build_container(settings: Settings, engine: Optional[Engine] = None) -> Container:
    engine = engine or create_db_engine(settings)
    executor = QueryExecutor(engine)
    transactions = TransactionManager(
        engine,
        backoff_base_ms=settings.TX_BACKOFF_BASE_MS,
        backoff_cap_ms=settings.TX_BACKOFF_CAP_MS,
    )

    trip_repository = TripRepository(executor)
    service_repository = ServiceRepository(executor)
    finance_repository = FinanceRepository(executor)

    return Container(
        settings=settings,
        trip_service=TripService(trip_repository, service_repository, transactions, settings),
        services_service=ServicesService(service_repository, transactions, settings),
        finance_service=FinanceService(finance_repository, settings),
        engine=engine,
    )
