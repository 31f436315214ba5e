"""
Tests for the transaction manager.
"""
import pytest
from pymysql.err import OperationalError

from app.core.errors import ConflictError, InfrastructureError, NotFoundError
from app.db.transaction import TransactionManager


def test_commit_on_success(transactions, database):
    result = transactions.execute(lambda conn: "AB12CD")
    assert result == "AB12CD"
    assert database.events == ["begin", "commit", "close"]


def test_rollback_on_domain_error(transactions, database):
    """Domain errors propagate unchanged after rollback."""
    error = NotFoundError("Service 3 is not attached to trip AB12CD")

    def callback(conn):
        raise error

    with pytest.raises(NotFoundError) as exc_info:
        transactions.execute(callback)

    assert exc_info.value is error
    assert database.events == ["begin", "rollback", "close"]


def test_unexpected_error_is_wrapped(transactions, database):
    def callback(conn):
        raise RuntimeError("socket closed")

    with pytest.raises(InfrastructureError) as exc_info:
        transactions.execute(callback)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert database.events == ["begin", "rollback", "close"]


def test_connection_failure_is_infrastructure_error(transactions, database):
    database.connect_error = OperationalError(2003, "Can't connect to MySQL server")
    with pytest.raises(InfrastructureError):
        transactions.execute(lambda conn: None)
    assert database.events == []


def test_failed_rollback_does_not_mask_original_error(engine, database):
    engine.rollback_error = RuntimeError("rollback failed")
    transactions = TransactionManager(engine)

    def callback(conn):
        raise ConflictError("duplicate")

    with pytest.raises(ConflictError):
        transactions.execute(callback)
    assert database.events == ["begin", "rollback", "close"]


def test_execute_steps_passes_previous_result(transactions, database):
    seen = []

    def first(conn, previous):
        seen.append(previous)
        return "AB12CD"

    def second(conn, previous):
        seen.append(previous)
        return {"id": previous}

    assert transactions.execute_steps([first, second]) == {"id": "AB12CD"}
    assert seen == [None, "AB12CD"]
    assert database.events == ["begin", "commit", "close"]


def test_execute_steps_failure_after_first_rolls_back_everything(transactions, database):
    connections = []

    def first(conn, previous):
        connections.append(conn)
        return "AB12CD"

    def second(conn, previous):
        connections.append(conn)
        raise RuntimeError("second step failed")

    with pytest.raises(InfrastructureError):
        transactions.execute_steps([first, second])

    assert connections[0] is connections[1]
    assert "commit" not in database.events
    assert database.events == ["begin", "rollback", "close"]


def test_retry_on_deadlock_then_success(transactions, database, no_sleep):
    attempts = []

    def callback(conn):
        attempts.append(conn)
        if len(attempts) < 3:
            raise OperationalError(1213, "Deadlock found when trying to get lock")
        return "AB12CD"

    assert transactions.execute_with_retry(callback, max_attempts=3) == "AB12CD"
    assert len(attempts) == 3
    assert no_sleep == [0.1, 0.2]
    assert database.events.count("rollback") == 2
    assert database.events.count("commit") == 1


def test_retry_exhausted_raises_last_error(transactions, no_sleep):
    def callback(conn):
        raise OperationalError(1213, "Deadlock found when trying to get lock")

    with pytest.raises(InfrastructureError) as exc_info:
        transactions.execute_with_retry(callback, max_attempts=2)

    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert no_sleep == [0.1]


def test_non_transient_error_is_not_retried(transactions, no_sleep):
    calls = []

    def callback(conn):
        calls.append(conn)
        raise ConflictError("duplicate")

    with pytest.raises(ConflictError):
        transactions.execute_with_retry(callback, max_attempts=3)

    assert len(calls) == 1
    assert no_sleep == []


def test_backoff_is_capped(engine):
    transactions = TransactionManager(engine, backoff_base_ms=100, backoff_cap_ms=300)
    assert [transactions.backoff_delay_ms(n) for n in (1, 2, 3, 4)] == [100, 200, 300, 300]
