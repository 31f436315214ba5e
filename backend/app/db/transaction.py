"""
Transaction manager for multi-statement atomic writes.
"""
import logging
import time
from typing import Any, Callable, Optional, Sequence, TypeVar

from sqlalchemy.engine import Connection, Engine

from app.core.errors import InfrastructureError
from app.db.query_executor import is_transient_error, translate_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionManager:
    """
    Runs callbacks inside a single database transaction.

    The callback receives the transactional connection and must pass it to
    every repository call it makes. The transaction commits when the callback
    returns and rolls back when it raises; the connection goes back to the pool
    in both cases.
    """

    def __init__(
        self,
        engine: Engine,
        backoff_base_ms: int = 100,
        backoff_cap_ms: int = 1000,
    ):
        self._engine = engine
        self._backoff_base_ms = backoff_base_ms
        self._backoff_cap_ms = backoff_cap_ms

    def execute(self, callback: Callable[[Connection], T]) -> T:
        start = time.perf_counter()
        try:
            conn = self._engine.connect()
        except Exception as exc:
            logger.error("Could not acquire a database connection", exc_info=True)
            raise InfrastructureError("Could not acquire a database connection") from exc

        try:
            try:
                transaction = conn.begin()
            except Exception as exc:
                raise InfrastructureError("Could not start a transaction") from exc
            logger.debug("Transaction started")
            try:
                result = callback(conn)
                transaction.commit()
            except Exception as exc:
                self._rollback(transaction)
                logger.error(
                    f"Transaction rolled back after {self._elapsed_ms(start):.1f}ms: "
                    f"{type(exc).__name__}: {exc}"
                )
                error = translate_error(exc, "Transaction")
                if error is exc:
                    raise
                raise error from exc
        finally:
            conn.close()

        logger.debug(f"Transaction committed in {self._elapsed_ms(start):.1f}ms")
        return result

    def execute_steps(self, steps: Sequence[Callable[[Connection, Any], Any]]) -> Any:
        """
        Run dependent steps in order on one transaction.

        Each step is called as ``step(conn, previous_result)``; the first step
        receives ``None``. Returns the result of the last step.
        """
        def run_all(conn: Connection) -> Any:
            result = None
            for step in steps:
                result = step(conn, result)
            return result

        return self.execute(run_all)

    def execute_with_retry(
        self, callback: Callable[[Connection], T], max_attempts: int = 3
    ) -> T:
        """
        Run ``callback`` in a transaction, retrying the whole unit on deadlocks.

        Each attempt starts from a fresh transaction. Errors that are not lock
        contention are raised immediately.
        """
        attempts = max(max_attempts, 1)
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                return self.execute(callback)
            except Exception as exc:
                last_error = exc
                if not is_transient_error(exc) or attempt == attempts:
                    raise
                delay_ms = self.backoff_delay_ms(attempt)
                logger.warning(
                    f"Deadlock detected, retrying transaction "
                    f"(attempt {attempt}/{attempts}) in {delay_ms}ms"
                )
                time.sleep(delay_ms / 1000)

        # Unreachable: the loop either returns or raises
        raise InfrastructureError("Transaction failed after retries") from last_error

    def backoff_delay_ms(self, attempt: int) -> int:
        return min(self._backoff_base_ms * 2 ** (attempt - 1), self._backoff_cap_ms)

    @staticmethod
    def _rollback(transaction) -> None:
        try:
            transaction.rollback()
        except Exception:
            logger.exception("Rollback failed")

    @staticmethod
    def _elapsed_ms(start: float) -> float:
        return (time.perf_counter() - start) * 1000
