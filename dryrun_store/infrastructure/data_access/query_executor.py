"""Query execution and result handling abstractions."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class QueryResult:
    """Represents the result of a database query.

    Provides a consistent interface for query results regardless
    of the underlying database implementation.
    """

    rows: list[dict[str, Any]]
    row_count: int
    column_names: list[str]
    execution_time_ms: float | None = None

    def first(self) -> dict[str, Any] | None:
        """Get the first row of results.

        Returns:
            First row as dictionary, or None if no results
        """
        return self.rows[0] if self.rows else None

    def scalar(self) -> Any:
        """Get a single scalar value from the first row, first column.

        Returns:
            Scalar value, or None if no results
        """
        if not self.rows or not self.column_names:
            return None
        return self.rows[0][self.column_names[0]]

    def is_empty(self) -> bool:
        """Check if query returned no results."""
        return self.row_count == 0


class QueryExecutor(ABC):
    """Abstract interface for executing statements on an open transaction.

    Engine errors are never raised as-is: implementations hand them to an
    error classifier and raise the resulting ``ClientError``.
    """

    @abstractmethod
    async def execute_query(self, sql: str, parameters: Sequence[Any] | None = None) -> QueryResult:
        """Execute a SELECT query and return results.

        Args:
            sql: SQL SELECT statement
            parameters: Positional parameters for the query

        Returns:
            QueryResult containing rows and metadata

        Raises:
            ClientError: If the engine rejects the statement
        """
        pass

    @abstractmethod
    async def execute_command(self, sql: str, parameters: Sequence[Any] | None = None) -> int:
        """Execute a non-query command (UPDATE, DELETE, multi-row INSERT).

        Returns:
            Number of affected rows

        Raises:
            ClientError: If the engine rejects the statement
        """
        pass

    @abstractmethod
    async def execute_insert(self, sql: str, parameters: Sequence[Any] | None = None) -> int:
        """Execute an INSERT and return the id generated for the new row.

        Raises:
            ClientError: If the engine rejects the statement
        """
        pass

    async def fetch_one(self, sql: str, parameters: Sequence[Any] | None = None) -> dict[str, Any] | None:
        """Execute a query and return its first row, or None."""
        result = await self.execute_query(sql, parameters)
        return result.first()

    async def execute_scalar(self, sql: str, parameters: Sequence[Any] | None = None) -> Any:
        """Execute a query and return a single scalar value."""
        result = await self.execute_query(sql, parameters)
        return result.scalar()

    @abstractmethod
    def escape_identifier(self, identifier: str) -> str:
        """Escape a database identifier (table, column name).

        Args:
            identifier: Database identifier to escape

        Returns:
            Properly escaped identifier for the database
        """
        pass
