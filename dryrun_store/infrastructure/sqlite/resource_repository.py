"""
Generic resource operations over any table.

Each public operation runs as exactly one simulated transaction: the
statements are executed and then rolled back, so callers see the effect of
a write without it ever being persisted.

The ``select_*``, ``insert_*``, ``update_row``, ``toggle_column``,
``delete_row`` and ``query_rows`` primitives take the executor bound to an
open transaction as their first argument, which lets composite operations
chain several of them inside one transaction.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional

from dryrun_store.domain.entities import Filter
from dryrun_store.domain.exceptions import ClientError
from dryrun_store.infrastructure.data_access.connection import TransactionRunner
from dryrun_store.infrastructure.data_access.query_executor import QueryExecutor

from .query_builder import SQLiteQueryBuilder

NOTHING_CHANGED_MESSAGE = "Element not found or nothing changed"

Row = dict[str, Any]
Filters = Iterable[Filter | Mapping[str, Any]]


class SQLiteResourceRepository:
    """Dry-run CRUD operations shared by every resource type."""

    def __init__(self, transaction_runner: TransactionRunner, query_builder: Optional[SQLiteQueryBuilder] = None):
        """
        Initialize the repository.

        Args:
            transaction_runner: Runs each operation in its own rolled-back transaction
            query_builder: Statement builder (a default one is created if None)
        """
        self.transaction_runner = transaction_runner
        self.query_builder = query_builder or SQLiteQueryBuilder()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._log_prefix = f"[{self.__class__.__name__}]"

    # =================================================================
    # In-transaction primitives
    # =================================================================

    async def select_rows(
        self,
        executor: QueryExecutor,
        table: str,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Filters] = None,
        limit: Optional[int] = None,
    ) -> list[Row]:
        sql, parameters = self.query_builder.build_select(table, columns, filters, limit)
        result = await executor.execute_query(sql, parameters)
        return result.rows

    async def select_row_by_id(
        self, executor: QueryExecutor, table: str, record_id: Any, columns: Optional[Sequence[str]] = None
    ) -> Optional[Row]:
        sql, parameters = self.query_builder.build_select_by_id(table, record_id, columns)
        return await executor.fetch_one(sql, parameters)

    async def insert_row(self, executor: QueryExecutor, table: str, data: Mapping[str, Any]) -> int:
        """Insert one row and return its generated id."""
        sql, parameters = self.query_builder.build_insert(table, data)
        return await executor.execute_insert(sql, parameters)

    async def insert_rows(self, executor: QueryExecutor, table: str, records: Sequence[Mapping[str, Any]]) -> int:
        """Insert several rows with one statement and return the change count."""
        sql, parameters = self.query_builder.build_bulk_insert(table, records)
        return await executor.execute_command(sql, parameters)

    async def update_row(self, executor: QueryExecutor, table: str, record_id: Any, patch: Mapping[str, Any]) -> int:
        sql, parameters = self.query_builder.build_update(table, record_id, patch)
        return await executor.execute_command(sql, parameters)

    async def toggle_column(self, executor: QueryExecutor, table: str, record_id: Any, column: str) -> int:
        sql, parameters = self.query_builder.build_toggle(table, record_id, column)
        return await executor.execute_command(sql, parameters)

    async def delete_row(self, executor: QueryExecutor, table: str, record_id: Any) -> int:
        sql, parameters = self.query_builder.build_delete(table, record_id)
        return await executor.execute_command(sql, parameters)

    async def query_rows(self, executor: QueryExecutor, sql: str, parameters: Optional[Sequence[Any]] = None) -> list[Row]:
        """Run caller-written SQL (joins) with bound parameters."""
        result = await executor.execute_query(sql, parameters)
        return result.rows

    # =================================================================
    # Units of work
    # =================================================================

    async def _insert_and_reload(self, executor: QueryExecutor, table: str, data: Mapping[str, Any]) -> Optional[Row]:
        new_id = await self.insert_row(executor, table, data)
        return await self.select_row_by_id(executor, table, new_id)

    async def _update_and_reload(
        self, executor: QueryExecutor, table: str, record_id: Any, patch: Mapping[str, Any]
    ) -> Optional[Row]:
        changes = await self.update_row(executor, table, record_id, patch)
        if changes == 0:
            raise ClientError(NOTHING_CHANGED_MESSAGE)
        return await self.select_row_by_id(executor, table, record_id)

    async def _toggle_and_reload(self, executor: QueryExecutor, table: str, record_id: Any, column: str) -> Optional[Row]:
        changes = await self.toggle_column(executor, table, record_id, column)
        if changes == 0:
            raise ClientError(NOTHING_CHANGED_MESSAGE)
        return await self.select_row_by_id(executor, table, record_id)

    async def _delete(self, executor: QueryExecutor, table: str, record_id: Any) -> dict[str, Any]:
        changes = await self.delete_row(executor, table, record_id)
        if changes == 0:
            raise ClientError(NOTHING_CHANGED_MESSAGE)
        return {"id": record_id}

    # =================================================================
    # Public operations
    # =================================================================

    async def fetch_many(
        self,
        table: str,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Filters] = None,
        limit: Optional[int] = None,
    ) -> list[Row]:
        """Fetch rows matching every filter (AND), in engine order."""
        self.logger.debug(f"{self._log_prefix} fetch_many {table}")
        return await self.transaction_runner.run_simulated(self.select_rows, table, columns, filters, limit)

    async def fetch_by_id(self, table: str, record_id: Any, columns: Optional[Sequence[str]] = None) -> Optional[Row]:
        """Fetch one row by id, or None when it does not exist."""
        self.logger.debug(f"{self._log_prefix} fetch_by_id {table} id={record_id}")
        return await self.transaction_runner.run_simulated(self.select_row_by_id, table, record_id, columns)

    async def insert(self, table: str, data: Mapping[str, Any]) -> Optional[Row]:
        """Simulate an insert and return the full new row as the engine stored it."""
        self.logger.debug(f"{self._log_prefix} insert {table} keys={sorted(data)}")
        return await self.transaction_runner.run_simulated(self._insert_and_reload, table, data)

    async def update(self, table: str, record_id: Any, patch: Mapping[str, Any]) -> Optional[Row]:
        """Simulate an update and return the changed row.

        Raises:
            ClientError: If no row was changed
        """
        self.logger.debug(f"{self._log_prefix} update {table} id={record_id} keys={sorted(patch)}")
        return await self.transaction_runner.run_simulated(self._update_and_reload, table, record_id, patch)

    async def toggle_boolean(self, table: str, record_id: Any, column: str) -> Optional[Row]:
        """Simulate flipping a 0/1 column and return the changed row.

        Raises:
            ClientError: If no row was changed
        """
        self.logger.debug(f"{self._log_prefix} toggle {table}.{column} id={record_id}")
        return await self.transaction_runner.run_simulated(self._toggle_and_reload, table, record_id, column)

    async def delete_by_id(self, table: str, record_id: Any) -> dict[str, Any]:
        """Simulate a delete and return ``{"id": record_id}``.

        Raises:
            ClientError: If no row was deleted
        """
        self.logger.debug(f"{self._log_prefix} delete {table} id={record_id}")
        return await self.transaction_runner.run_simulated(self._delete, table, record_id)

    async def raw_query(self, sql: str, parameters: Optional[Sequence[Any]] = None) -> list[Row]:
        """Run a read-only join query inside a simulated transaction."""
        return await self.transaction_runner.run_simulated(self.query_rows, sql, parameters)
