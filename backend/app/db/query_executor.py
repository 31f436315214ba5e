"""
Query executor for stored procedure and plain SQL calls.

Every call goes through ``QueryExecutor.run``, which times the operation,
classifies failures and owns the connection when the caller did not pass one.
A connection passed in by the caller belongs to an enclosing transaction and is
never committed, rolled back or released here.
"""
import logging
import re
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from pymysql.cursors import DictCursor
from pymysql.err import MySQLError
from sqlalchemy import exc as sa_exc
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from app.core.errors import (
    AppError,
    ConflictError,
    InfrastructureError,
    InvalidInputError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
Row = Dict[str, Any]

_PROCEDURE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# MySQL server error numbers
ER_DUP_ENTRY = 1062
ER_NO_REFERENCED_ROW = 1216
ER_NO_REFERENCED_ROW_2 = 1452
ER_LOCK_WAIT_TIMEOUT = 1205
ER_LOCK_DEADLOCK = 1213


def _error_chain(exc: BaseException):
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if isinstance(current, sa_exc.DBAPIError) and current.orig is not None:
            yield current.orig
        current = current.__cause__


def mysql_error_code(exc: BaseException) -> Optional[int]:
    """Return the MySQL error number found in the exception chain, if any."""
    for error in _error_chain(exc):
        if isinstance(error, MySQLError) and error.args and isinstance(error.args[0], int):
            return error.args[0]
    return None


def is_transient_error(exc: BaseException) -> bool:
    """Lock contention that is safe to retry with a fresh transaction."""
    if mysql_error_code(exc) in (ER_LOCK_DEADLOCK, ER_LOCK_WAIT_TIMEOUT):
        return True
    return any("Deadlock" in str(error) for error in _error_chain(exc))


def translate_error(exc: Exception, description: str) -> AppError:
    """Map an unexpected exception to the domain error reported to callers."""
    if isinstance(exc, AppError):
        return exc
    code = mysql_error_code(exc)
    if code == ER_DUP_ENTRY:
        return ConflictError("A record with the same identity already exists")
    if code in (ER_NO_REFERENCED_ROW, ER_NO_REFERENCED_ROW_2):
        return InvalidInputError("A referenced catalog entry does not exist")
    return InfrastructureError(f"{description} failed")


def call_procedure(
    conn: Connection, procedure: str, params: Sequence[Any]
) -> Tuple[List[List[Row]], int]:
    """
    Call a stored procedure and collect every result set it returns.

    Returns the row-bearing result sets in the order the server sent them and
    the affected-row count of the trailing status packet.
    """
    if not _PROCEDURE_NAME.match(procedure):
        raise ValueError(f"Invalid procedure name: {procedure!r}")

    placeholders = ", ".join(["%s"] * len(params))
    cursor = conn.connection.cursor(DictCursor)
    try:
        cursor.execute(f"CALL {procedure}({placeholders})", tuple(params))
        result_sets: List[List[Row]] = []
        affected_rows = 0
        while True:
            if cursor.description is not None:
                result_sets.append(list(cursor.fetchall()))
            else:
                affected_rows = cursor.rowcount
            if not cursor.nextset():
                break
    finally:
        cursor.close()
    return result_sets, affected_rows


class QueryExecutor:
    """Runs operations against the aggregation engine."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def run(
        self,
        operation: Callable[[Connection], T],
        description: str = "Database query",
        conn: Optional[Connection] = None,
    ) -> T:
        start = time.perf_counter()
        try:
            if conn is not None:
                result = operation(conn)
            else:
                with self._engine.begin() as owned_conn:
                    result = operation(owned_conn)
        except AppError as exc:
            logger.warning(
                f"{description}: {exc.code.value} {exc.message} "
                f"({self._elapsed_ms(start):.1f}ms)"
            )
            raise
        except Exception as exc:
            error = translate_error(exc, description)
            if isinstance(error, InfrastructureError):
                logger.error(
                    f"{description}: unexpected error ({self._elapsed_ms(start):.1f}ms)",
                    exc_info=True,
                )
            else:
                logger.warning(
                    f"{description}: engine rejected the call with {error.code.value} "
                    f"({self._elapsed_ms(start):.1f}ms)"
                )
            raise error from exc

        logger.debug(f"{description} completed in {self._elapsed_ms(start):.1f}ms")
        return result

    @staticmethod
    def _elapsed_ms(start: float) -> float:
        return (time.perf_counter() - start) * 1000

    # Stored procedures

    def fetch_one(
        self,
        procedure: str,
        params: Sequence[Any],
        allow_empty: bool = False,
        conn: Optional[Connection] = None,
    ) -> Optional[Row]:
        """First row of the first result set."""
        def operation(connection: Connection) -> Optional[Row]:
            result_sets, _ = call_procedure(connection, procedure, params)
            rows = result_sets[0] if result_sets else []
            if not rows:
                if allow_empty:
                    return None
                raise NotFoundError(f"{procedure} returned no rows")
            return rows[0]

        return self.run(operation, f"CALL {procedure}", conn)

    def fetch_all(
        self, procedure: str, params: Sequence[Any], conn: Optional[Connection] = None
    ) -> List[Row]:
        """Rows of the first result set; empty is a valid result."""
        def operation(connection: Connection) -> List[Row]:
            result_sets, _ = call_procedure(connection, procedure, params)
            return result_sets[0] if result_sets else []

        return self.run(operation, f"CALL {procedure}", conn)

    def fetch_result_sets(
        self, procedure: str, params: Sequence[Any], conn: Optional[Connection] = None
    ) -> List[List[Row]]:
        """Every row-bearing result set, untouched, in server order."""
        def operation(connection: Connection) -> List[List[Row]]:
            result_sets, _ = call_procedure(connection, procedure, params)
            return result_sets

        return self.run(operation, f"CALL {procedure}", conn)

    def execute_procedure(
        self, procedure: str, params: Sequence[Any], conn: Optional[Connection] = None
    ) -> int:
        """Call a write procedure and return the affected row count."""
        def operation(connection: Connection) -> int:
            _, affected_rows = call_procedure(connection, procedure, params)
            return affected_rows

        return self.run(operation, f"CALL {procedure}", conn)

    # Plain SQL

    def select(
        self,
        sql: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
        description: str = "SELECT",
    ) -> List[Row]:
        def operation(connection: Connection) -> List[Row]:
            result = connection.execute(text(sql), params or {})
            return [dict(row) for row in result.mappings()]

        return self.run(operation, description, conn)

    def insert(
        self,
        sql: str,
        params: Dict[str, Any],
        conn: Optional[Connection] = None,
        description: str = "INSERT",
    ) -> int:
        """Run an INSERT and return the generated id."""
        def operation(connection: Connection) -> int:
            return connection.execute(text(sql), params).lastrowid

        return self.run(operation, description, conn)

    def update(
        self,
        sql: str,
        params: Dict[str, Any],
        conn: Optional[Connection] = None,
        description: str = "UPDATE",
    ) -> int:
        """Run an UPDATE and return the affected row count."""
        def operation(connection: Connection) -> int:
            return connection.execute(text(sql), params).rowcount

        return self.run(operation, description, conn)

    def delete(
        self,
        sql: str,
        params: Dict[str, Any],
        conn: Optional[Connection] = None,
        description: str = "DELETE",
    ) -> int:
        """Run a DELETE and return the affected row count."""
        def operation(connection: Connection) -> int:
            return connection.execute(text(sql), params).rowcount

        return self.run(operation, description, conn)
