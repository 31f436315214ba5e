"""
Tests for the stored procedure check.
"""
from app.db.diagnostics import REQUIRED_PROCEDURES, find_missing_procedures
from app.tests.fakes import FakeConnection, FakeResult


def test_all_procedures_present(database):
    database.statements["SELECT"] = FakeResult(
        rows=[{"ROUTINE_NAME": name} for name in REQUIRED_PROCEDURES]
    )
    assert find_missing_procedures(FakeConnection(database)) == []


def test_missing_procedures_in_declaration_order(database):
    present = [name for name in REQUIRED_PROCEDURES if name not in ("obtener_viajes", "resumen_financiero")]
    database.statements["SELECT"] = FakeResult(rows=[{"ROUTINE_NAME": name} for name in present])

    assert find_missing_procedures(FakeConnection(database)) == ["obtener_viajes", "resumen_financiero"]
