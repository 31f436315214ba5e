"""
Tests for attached-service operations.
"""
from decimal import Decimal

import pytest
from pymysql.err import IntegrityError

from app.core.errors import ConflictError, InvalidInputError, NotFoundError
from app.repositories.service_repository import ServiceRepository
from app.schemas.service import AttachedServiceCreate, AttachedServiceUpdate
from app.services.services_service import ServicesService
from app.tests.fakes import FakeResult


@pytest.fixture
def services_service(executor, transactions, test_settings):
    return ServicesService(ServiceRepository(executor), transactions, test_settings)


def attached(**overrides):
    data = {"trip_id": "AB12CD", "service_id": 1, "amount": "900", "paid_by": "pablo", "currency": 2}
    data.update(overrides)
    return AttachedServiceCreate(**data)


def test_list_catalog(services_service, database):
    database.statements["SELECT"] = FakeResult(rows=[{"id": 1, "nombre": "Vuelo"}])
    assert [entry.name for entry in services_service.list_service_catalog()] == ["Vuelo"]


def test_attach_service(services_service, database):
    services_service.attach_service(attached(paid_by=" Soledad "))

    assert database.called("insertar_servicio_viaje") == [
        ("AB12CD", 1, Decimal("900"), "soledad", 2, None)
    ]
    assert database.events == ["begin", "commit", "close"]


def test_attach_twice_is_conflict(services_service, database):
    database.fail("insertar_servicio_viaje", IntegrityError(1062, "Duplicate entry 'AB12CD-1'"))
    with pytest.raises(ConflictError):
        services_service.attach_service(attached())
    assert database.events == ["begin", "rollback", "close"]


@pytest.mark.parametrize(
    "overrides",
    [{"amount": "0"}, {"paid_by": "juan"}, {"currency": -1}, {"trip_id": " "}, {"exchange_rate": "0"}],
)
def test_attach_validation(services_service, database, overrides):
    with pytest.raises(InvalidInputError):
        services_service.attach_service(attached(**overrides))
    assert database.calls == []


def test_update_missing_association_is_not_found(services_service, database):
    """Zero affected rows is reported, not treated as success."""
    database.script("actualizar_servicio_viaje", 0)

    with pytest.raises(NotFoundError):
        services_service.update_attached_service("AB12CD", 9, AttachedServiceUpdate(amount="10"))


def test_update_attached_service(services_service, database):
    database.script("actualizar_servicio_viaje", 1)

    services_service.update_attached_service("AB12CD", 1, AttachedServiceUpdate(currency=1))

    assert database.called("actualizar_servicio_viaje") == [("AB12CD", 1, None, None, 1, None)]


def test_detach_missing_association_is_not_found(services_service, database):
    database.script("eliminar_servicio_viaje", 0)
    with pytest.raises(NotFoundError):
        services_service.detach_service("AB12CD", 9)


def test_detach_service(services_service, database):
    database.script("eliminar_servicio_viaje", 1)
    services_service.detach_service("AB12CD", 1)
    assert database.called("eliminar_servicio_viaje") == [("AB12CD", 1)]
