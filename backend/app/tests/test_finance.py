"""
Tests for finance aggregation and exchange rates.
"""
from decimal import Decimal

import pytest
from pymysql.err import OperationalError

from app.core.errors import InfrastructureError, InvalidInputError, NotFoundError
from app.repositories.finance_repository import FinanceRepository
from app.services.finance_service import FinanceService, group_by_month
from app.tests.fakes import FakeResult


@pytest.fixture
def finance_service(executor, test_settings):
    return FinanceService(FinanceRepository(executor), test_settings)


def test_summary_groups_currencies_of_one_month(finance_service, database):
    """Two currencies of January end up in one month entry."""
    database.script(
        "resumen_financiero",
        [
            {"mes_num": 1, "moneda": "USD", "ingreso": 100, "egreso": 40},
            {"mes_num": 1, "moneda": "ARS", "ingreso": 5000, "egreso": 2000},
        ],
    )

    summary = finance_service.finance_summary(year=2025)

    assert len(summary) == 1
    assert summary[0].month_number == 1
    assert summary[0].month == "enero"
    assert [(s.currency, s.profit) for s in summary[0].summary] == [
        ("USD", Decimal("60")),
        ("ARS", Decimal("3000")),
    ]
    assert database.called("resumen_financiero") == [(None, 2025, None)]


def test_engine_profit_is_kept():
    rows = [{"mes": "marzo", "mes_num": 3, "moneda": "USD", "ingreso": 100, "egreso": 40, "ganancia": 55}]
    (month,) = group_by_month(rows)
    assert month.month == "marzo"
    assert month.summary[0].profit == Decimal("55")


def test_grouping_keeps_delivered_order():
    rows = [
        {"mes_num": 2, "moneda": "ARS", "ingreso": 1, "egreso": 0},
        {"mes_num": 1, "moneda": "USD", "ingreso": 1, "egreso": 0},
        {"mes_num": 2, "moneda": "USD", "ingreso": 1, "egreso": 0},
    ]
    summary = group_by_month(rows)
    assert [m.month_number for m in summary] == [2, 1]
    assert [s.currency for s in summary[0].summary] == ["ARS", "USD"]


def test_regrouping_reproduces_input_tuples():
    rows = [
        {"mes_num": 1, "moneda": "ARS", "ingreso": "5000.50", "egreso": "2000.25"},
        {"mes_num": 1, "moneda": "USD", "ingreso": 100, "egreso": 40},
        {"mes_num": 4, "moneda": "USD", "ingreso": 0, "egreso": 80},
    ]
    summary = group_by_month(rows)

    flattened = {
        (m.month_number, s.currency, s.income, s.expense) for m in summary for s in m.summary
    }
    expected = {
        (r["mes_num"], r["moneda"], Decimal(str(r["ingreso"])), Decimal(str(r["egreso"]))) for r in rows
    }
    assert flattened == expected


def test_malformed_row_is_infrastructure_error():
    with pytest.raises(InfrastructureError):
        group_by_month([{"moneda": "USD", "ingreso": 1, "egreso": 0}])


@pytest.mark.parametrize("year, month", [(2024, None), (2025, 0), (2025, 13)])
def test_summary_rejects_bad_period(finance_service, database, year, month):
    with pytest.raises(InvalidInputError):
        finance_service.finance_summary(year=year, month=month)
    assert database.calls == []


def test_create_exchange_rate(finance_service, database):
    database.statements["INSERT"] = FakeResult(lastrowid=17)

    assert finance_service.create_exchange_rate(2, Decimal("1050.5")) == 17
    sql, params = database.calls[0]
    assert sql.startswith("INSERT INTO tipo_cambio")
    assert params == {"currency": 2, "rate": Decimal("1050.5")}


@pytest.mark.parametrize("currency, rate", [(2, Decimal("0")), (2, Decimal("-1")), (0, Decimal("10"))])
def test_create_exchange_rate_validation(finance_service, database, currency, rate):
    with pytest.raises(InvalidInputError):
        finance_service.create_exchange_rate(currency, rate)
    assert database.calls == []


def test_update_missing_exchange_rate(finance_service, database):
    database.statements["UPDATE"] = FakeResult(rowcount=0)
    with pytest.raises(NotFoundError):
        finance_service.update_exchange_rate(99, Decimal("10"))


def test_update_exchange_rate(finance_service, database):
    database.statements["UPDATE"] = FakeResult(rowcount=1)
    finance_service.update_exchange_rate(5, Decimal("10"))
    assert database.calls[0][1] == {"rate": Decimal("10"), "rate_id": 5}


def test_failed_statement_is_named_in_error(finance_service, database):
    database.statements["UPDATE"] = OperationalError(2013, "Lost connection to MySQL server")

    with pytest.raises(InfrastructureError) as exc_info:
        finance_service.update_exchange_rate(5, Decimal("10"))

    assert exc_info.value.message == "UPDATE tipo_cambio failed"
