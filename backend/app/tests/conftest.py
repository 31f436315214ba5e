"""
Shared fixtures for the test suite.
"""
import pytest

from app.core.config import Settings
from app.db.query_executor import QueryExecutor
from app.db.transaction import TransactionManager
from app.tests.fakes import FakeDatabase, FakeEngine


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def engine(database):
    return FakeEngine(database)


@pytest.fixture
def executor(engine):
    return QueryExecutor(engine)


@pytest.fixture
def transactions(engine):
    return TransactionManager(engine, backoff_base_ms=100, backoff_cap_ms=1000)


@pytest.fixture
def test_settings():
    return Settings(_env_file=None)


@pytest.fixture
def no_sleep(monkeypatch):
    """Record retry delays instead of sleeping."""
    delays = []
    monkeypatch.setattr("app.db.transaction.time.sleep", lambda seconds: delays.append(seconds))
    return delays


@pytest.fixture
def make_trip_row():
    """Factory for a trip row as returned by ``obtener_viaje(s)``."""
    def _make(trip_id: str = "AB12CD", **overrides):
        row = {
            "id": trip_id,
            "apellido": "Gomez",
            "valor_total": 1500,
            "destino": "internacional",
            "fecha_ida": "2025-03-01",
            "fecha_vuelta": "2025-03-10",
            "moneda": "USD",
            "estado": "pendiente",
            "costo": 900,
            "ganancia": 600,
            "cotizacion": None,
            "servicios": '[{"id": 1, "nombre": "Vuelo", "valor": 900, "pagado_por": "pablo", "moneda": "USD"}]',
        }
        row.update(overrides)
        return row

    return _make
