"""SQLite query execution implementation."""

import logging
import sqlite3
import time
from collections.abc import Sequence
from typing import Any, Optional

import aiosqlite

from dryrun_store.domain.exceptions import ServerError
from dryrun_store.infrastructure.data_access.query_executor import QueryExecutor, QueryResult

from .connection import SQLiteConnection
from .error_classifier import SQLiteErrorClassifier, default_classifier
from .query_builder import sanitize_identifier

logger = logging.getLogger(__name__)


class SQLiteQueryExecutor(QueryExecutor):
    """Executes statements on one SQLite connection, in issue order.

    Engine errors are classified and raised as ``ClientError`` with the
    original message kept as ``raw``.
    """

    def __init__(self, connection: SQLiteConnection, classifier: Optional[SQLiteErrorClassifier] = None):
        """Initialize query executor.

        Args:
            connection: SQLite connection to execute statements on
            classifier: Error classifier (uses the default rule set if None)
        """
        self.connection = connection
        self.classifier = classifier or default_classifier

    async def _raw_connection(self) -> aiosqlite.Connection:
        if not await self.connection.is_connected():
            raise ServerError("Database connection is not active")
        raw_conn = self.connection.raw_connection
        if raw_conn is None:
            raise ServerError("No raw connection available")
        return raw_conn

    async def execute_query(self, sql: str, parameters: Sequence[Any] | None = None) -> QueryResult:
        """Execute a SELECT query and return results."""
        raw_conn = await self._raw_connection()

        try:
            start_time = time.perf_counter()

            async with raw_conn.execute(sql, tuple(parameters or ())) as cursor:
                rows = await cursor.fetchall()
                column_names = [desc[0] for desc in cursor.description] if cursor.description else []

            dict_rows = [dict(zip(column_names, row)) for row in rows]
            execution_time = (time.perf_counter() - start_time) * 1000

            logger.debug(f"Query executed successfully: {len(dict_rows)} rows in {execution_time:.2f}ms")
            return QueryResult(
                rows=dict_rows,
                row_count=len(dict_rows),
                column_names=column_names,
                execution_time_ms=execution_time,
            )

        except sqlite3.Error as e:
            logger.error(f"Query execution failed: {str(e)}")
            raise self.classifier.classify(e) from e

    async def execute_command(self, sql: str, parameters: Sequence[Any] | None = None) -> int:
        """Execute a non-query command and return the affected row count."""
        raw_conn = await self._raw_connection()

        try:
            start_time = time.perf_counter()

            async with raw_conn.execute(sql, tuple(parameters or ())) as cursor:
                affected_rows = cursor.rowcount if cursor.rowcount >= 0 else 0

            execution_time = (time.perf_counter() - start_time) * 1000
            logger.debug(f"Command executed: {affected_rows} rows affected in {execution_time:.2f}ms")
            return affected_rows

        except sqlite3.Error as e:
            logger.error(f"Command execution failed: {str(e)}")
            raise self.classifier.classify(e) from e

    async def execute_insert(self, sql: str, parameters: Sequence[Any] | None = None) -> int:
        """Execute an INSERT and return the generated row id."""
        raw_conn = await self._raw_connection()

        try:
            async with raw_conn.execute(sql, tuple(parameters or ())) as cursor:
                last_row_id = cursor.lastrowid

            logger.debug(f"Insert executed: generated id {last_row_id}")
            return last_row_id

        except sqlite3.Error as e:
            logger.error(f"Insert execution failed: {str(e)}")
            raise self.classifier.classify(e) from e

    def escape_identifier(self, identifier: str) -> str:
        """Escape a database identifier (table, column name)."""
        return sanitize_identifier(identifier)
