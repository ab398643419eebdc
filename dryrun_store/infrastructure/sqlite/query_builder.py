"""Query builder for SQLite statements with identifier sanitization."""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from dryrun_store.domain.entities import Filter, FilterOperator
from dryrun_store.domain.exceptions import ClientError

logger = logging.getLogger(__name__)

_QUOTE_CHARACTERS = re.compile(r"['\"`]")

ID_COLUMN = "id"


def sanitize_identifier(name: str) -> str:
    """Make a table or column name safe to interpolate into SQL.

    SQLite cannot bind identifiers as parameters, so quote characters are
    stripped and the result is wrapped in double quotes. The wildcard ``*``
    is returned unchanged.

    Args:
        name: Raw identifier

    Returns:
        Double-quoted identifier, or ``*``
    """
    if name == "*":
        return "*"
    cleaned = _QUOTE_CHARACTERS.sub("", str(name))
    return f'"{cleaned}"'


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class SQLiteQueryBuilder:
    """Builds parameterized single-table statements.

    Every method returns a ``(sql, parameters)`` tuple. Identifiers go
    through :func:`sanitize_identifier`; values are always bound.
    """

    def __init__(self):
        """Initialize the query builder."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    sanitize = staticmethod(sanitize_identifier)

    def _table(self, table: Any) -> str:
        if not isinstance(table, str) or not table.strip():
            raise ClientError("Invalid table name")
        return sanitize_identifier(table)

    def _columns(self, columns: Any) -> str:
        if not isinstance(columns, (list, tuple)) or len(columns) == 0:
            columns = ["*"]
        return ", ".join(sanitize_identifier(column) for column in columns)

    def build_where(self, filters: Iterable[Filter | Mapping[str, Any]] | None) -> tuple[str, list[Any]]:
        """Build a WHERE clause joining every filter with AND.

        Operators are checked against the whitelist before any SQL text is
        produced.

        Args:
            filters: Filters or ``{"column", "operator", "value"}`` mappings

        Returns:
            Tuple of (" WHERE ..." or empty string, parameters list)
        """
        if not filters:
            return "", []

        # Validate all filters up front
        parsed = [Filter.coerce(item) for item in filters]

        clauses = []
        parameters: list[Any] = []
        for condition in parsed:
            column = sanitize_identifier(condition.column)
            if condition.operator is FilterOperator.IN:
                placeholders = ", ".join("?" for _ in condition.value)
                clauses.append(f"{column} IN ({placeholders})")
            else:
                clauses.append(f"{column} {condition.operator.value} ?")
            parameters.extend(condition.parameters)

        return " WHERE " + " AND ".join(clauses), parameters

    def build_select(
        self,
        table: str,
        columns: Sequence[str] | None = None,
        filters: Iterable[Filter | Mapping[str, Any]] | None = None,
        limit: int | None = None,
    ) -> tuple[str, list[Any]]:
        """Build a SELECT with optional filters and limit.

        Args:
            table: Table name
            columns: Columns to select (defaults to ``*``)
            filters: Conditions joined with AND
            limit: Applied only when it is a positive integer

        Returns:
            Tuple of (SQL query, parameters list)
        """
        table_sql = self._table(table)
        where_sql, parameters = self.build_where(filters)

        query = f"SELECT {self._columns(columns)} FROM {table_sql}{where_sql}"
        if _is_positive_int(limit):
            query += f" LIMIT {limit}"

        return query, parameters

    def build_select_by_id(
        self, table: str, record_id: Any, columns: Sequence[str] | None = None
    ) -> tuple[str, list[Any]]:
        """Build a SELECT for one record by its id."""
        table_sql = self._table(table)
        query = f"SELECT {self._columns(columns)} FROM {table_sql} WHERE {sanitize_identifier(ID_COLUMN)} = ?"
        return query, [record_id]

    def build_insert(self, table: str, data: Mapping[str, Any]) -> tuple[str, list[Any]]:
        """Build a single-row INSERT.

        Raises:
            ClientError: If ``data`` has no fields
        """
        table_sql = self._table(table)
        if not data:
            raise ClientError("No fields were passed to insert.")

        columns = ", ".join(sanitize_identifier(key) for key in data)
        placeholders = ", ".join("?" for _ in data)
        return f"INSERT INTO {table_sql} ({columns}) VALUES ({placeholders})", list(data.values())

    def build_bulk_insert(self, table: str, records: Sequence[Mapping[str, Any]]) -> tuple[str, list[Any]]:
        """Build a multi-row INSERT.

        The column list comes from the first record. Values of every record
        are bound in their own insertion order, and records are not checked
        for a matching field set.

        Raises:
            ClientError: If there are no records or the first one is empty
        """
        table_sql = self._table(table)
        if not records:
            raise ClientError("No records were passed to insert.")

        keys = list(records[0])
        if not keys:
            raise ClientError("No fields were passed to insert.")

        columns = ", ".join(sanitize_identifier(key) for key in keys)
        row_placeholders = "(" + ", ".join("?" for _ in keys) + ")"
        all_rows = ", ".join(row_placeholders for _ in records)

        parameters: list[Any] = []
        for record in records:
            # TODO: reject batches whose records do not share the first record's keys
            parameters.extend(record.values())

        return f"INSERT INTO {table_sql} ({columns}) VALUES {all_rows}", parameters

    def build_update(self, table: str, record_id: Any, patch: Mapping[str, Any]) -> tuple[str, list[Any]]:
        """Build an UPDATE for one record by its id.

        Raises:
            ClientError: If ``patch`` has no fields
        """
        table_sql = self._table(table)
        if not patch:
            raise ClientError("No data to update")

        assignments = ", ".join(f"{sanitize_identifier(key)} = ?" for key in patch)
        parameters = list(patch.values())
        parameters.append(record_id)
        return f"UPDATE {table_sql} SET {assignments} WHERE {sanitize_identifier(ID_COLUMN)} = ?", parameters

    def build_toggle(self, table: str, record_id: Any, column: str) -> tuple[str, list[Any]]:
        """Build an UPDATE flipping a 0/1 column of one record."""
        table_sql = self._table(table)
        if not isinstance(column, str) or not column.strip():
            raise ClientError("Invalid column name")

        column_sql = sanitize_identifier(column)
        query = (
            f"UPDATE {table_sql} SET {column_sql} = CASE {column_sql} WHEN 1 THEN 0 ELSE 1 END "
            f"WHERE {sanitize_identifier(ID_COLUMN)} = ?"
        )
        return query, [record_id]

    def build_delete(self, table: str, record_id: Any) -> tuple[str, list[Any]]:
        """Build a DELETE for one record by its id."""
        table_sql = self._table(table)
        return f"DELETE FROM {table_sql} WHERE {sanitize_identifier(ID_COLUMN)} = ?", [record_id]
