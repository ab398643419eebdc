"""Simulated transactions: every unit of work is rolled back."""

import logging
import sqlite3
from enum import Enum
from typing import Any, Optional, TypeVar

from dryrun_store.config.schema import DatabaseConnectionConfig
from dryrun_store.domain.exceptions import AppError, ServerError
from dryrun_store.infrastructure.data_access.connection import TransactionRunner, UnitOfWork

from .connection import SQLiteConnection
from .error_classifier import SQLiteErrorClassifier, default_classifier
from .query_executor import SQLiteQueryExecutor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionState(Enum):
    """Lifecycle of a simulated transaction."""

    IDLE = "idle"
    CONNECTED = "connected"
    TX_OPEN = "tx_open"
    WORK_RUNNING = "work_running"
    ROLLING_BACK = "rolling_back"
    DONE = "done"
    ERROR = "error"


class SimulatedTransaction:
    """Runs one unit of work inside a transaction that is always rolled back.

    An instance serves exactly one call. Successful calls end in ``DONE``,
    failed ones in ``ERROR``; neither can be run again.
    """

    def __init__(self, connection: SQLiteConnection, classifier: Optional[SQLiteErrorClassifier] = None):
        self.connection = connection
        self.classifier = classifier or default_classifier
        self.state = TransactionState.IDLE

    def _transition(self, state: TransactionState) -> None:
        logger.debug(f"Simulated transaction {self.state.value} -> {state.value}")
        self.state = state

    async def run(self, unit_of_work: UnitOfWork[T], *args: Any, **kwargs: Any) -> T:
        """Run ``unit_of_work(executor, *args, **kwargs)`` and roll back.

        Raises:
            ClientError: Raised by the unit of work, or a classified engine error
            NotFoundError: Raised unchanged from the unit of work
            ServerError: Connection failure, reuse, or an unexpected exception
        """
        if self.state is not TransactionState.IDLE:
            raise ServerError("Internal server error", raw="simulated transaction cannot be reused")

        try:
            await self.connection.connect()
        except BaseException:
            self._transition(TransactionState.ERROR)
            raise

        self._transition(TransactionState.CONNECTED)
        try:
            result = await self._run_in_transaction(unit_of_work, args, kwargs)
        except BaseException:
            self._transition(TransactionState.ERROR)
            raise
        finally:
            await self.connection.disconnect()

        self._transition(TransactionState.DONE)
        return result

    async def _run_in_transaction(self, unit_of_work: UnitOfWork[T], args: tuple, kwargs: dict) -> T:
        executor = SQLiteQueryExecutor(self.connection, self.classifier)

        await executor.execute_command("BEGIN TRANSACTION")
        self._transition(TransactionState.TX_OPEN)

        error: Optional[Exception] = None
        result = None
        try:
            self._transition(TransactionState.WORK_RUNNING)
            result = await unit_of_work(executor, *args, **kwargs)
        except Exception as e:
            error = e
        finally:
            self._transition(TransactionState.ROLLING_BACK)
            rollback_error = await self._rollback()

        if rollback_error is not None:
            raise rollback_error from error

        if error is not None:
            normalized = self._normalize(error)
            if normalized is error:
                raise error
            raise normalized from error

        return result

    async def _rollback(self) -> Optional[AppError]:
        """Issue ROLLBACK; return the classified failure instead of raising it."""
        raw_conn = self.connection.raw_connection
        try:
            if raw_conn is None:
                raise sqlite3.OperationalError("cannot rollback - no open connection")
            await raw_conn.execute("ROLLBACK")
            logger.debug("Simulated transaction rolled back")
            return None
        except Exception as e:
            logger.error(f"Failed to rollback transaction: {str(e)}")
            return self.classifier.classify(e)

    def _normalize(self, error: Exception) -> AppError:
        """Map a unit-of-work failure onto the AppError taxonomy."""
        if isinstance(error, AppError):
            return error
        if isinstance(error, sqlite3.Error):
            return self.classifier.classify(error)

        logger.error(f"Unexpected error in unit of work: {error!r}")
        return ServerError("Internal server error", raw=str(error) or repr(error))


class SQLiteTransactionRunner(TransactionRunner):
    """Creates a fresh connection and simulated transaction for every call."""

    def __init__(
        self,
        database_path: str,
        config: Optional[DatabaseConnectionConfig] = None,
        classifier: Optional[SQLiteErrorClassifier] = None,
    ):
        """Initialize the runner.

        Args:
            database_path: Path to the SQLite database file
            config: Connection settings applied to every new connection
            classifier: Error classifier shared by all transactions
        """
        self.database_path = database_path
        self.config = config
        self.classifier = classifier or default_classifier

    def create_transaction(self) -> SimulatedTransaction:
        connection = SQLiteConnection(self.database_path, self.config)
        return SimulatedTransaction(connection, self.classifier)

    async def run_simulated(self, unit_of_work: UnitOfWork[T], *args: Any, **kwargs: Any) -> T:
        transaction = self.create_transaction()
        return await transaction.run(unit_of_work, *args, **kwargs)
