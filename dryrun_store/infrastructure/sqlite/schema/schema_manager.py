"""SQLite schema manager implementation."""

import logging
from typing import Optional

from dryrun_store.config.schema import DatabaseConnectionConfig
from dryrun_store.domain.exceptions import AppError, ServerError
from dryrun_store.infrastructure.data_access.schema_manager import SchemaManager, TableDefinition

from ..connection import SQLiteConnection
from ..query_executor import SQLiteQueryExecutor
from .schema_definitions import StoreSchema

logger = logging.getLogger(__name__)


def build_create_table_sql(table_def: TableDefinition) -> str:
    """Generate CREATE TABLE SQL for SQLite.

    Args:
        table_def: Table definition to generate SQL for

    Returns:
        Complete CREATE TABLE statement
    """
    column_lines = [f"    {name} {definition}" for name, definition in table_def.columns.items()]

    for column, reference in table_def.foreign_keys.items():
        ref_table, ref_column = reference.split(".", 1)
        column_lines.append(f"    FOREIGN KEY ({column}) REFERENCES {ref_table}({ref_column})")

    for constraint in table_def.constraints:
        column_lines.append(f"    {constraint}")

    return f"CREATE TABLE IF NOT EXISTS {table_def.name} (\n" + ",\n".join(column_lines) + "\n)"


def get_table_creation_order(tables: dict[str, TableDefinition]) -> list[str]:
    """Order tables so every table comes after the tables it references."""
    ordered: list[str] = []
    visiting: set[str] = set()

    def visit(name: str) -> None:
        if name in ordered or name not in tables:
            return
        if name in visiting:
            raise ServerError("Internal server error", raw=f"circular foreign key dependency at {name}")
        visiting.add(name)
        for dependency in sorted(tables[name].dependencies):
            visit(dependency)
        visiting.discard(name)
        ordered.append(name)

    for table_name in tables:
        visit(table_name)
    return ordered


class SQLiteSchemaManager(SchemaManager):
    """Creates and inspects the store schema.

    Statements run on an autocommit connection, so unlike the resource
    operations these changes are persisted.
    """

    def __init__(self, database_path: str, config: Optional[DatabaseConnectionConfig] = None):
        self.database_path = database_path
        self.config = config
        self.tables = StoreSchema.get_all_tables()

    async def create_schema(self) -> None:
        """Create the complete database schema."""
        connection = SQLiteConnection(self.database_path, self.config)
        await connection.connect()
        try:
            logger.info(f"Creating store database schema in {self.database_path}")
            executor = SQLiteQueryExecutor(connection)

            for table_name in get_table_creation_order(self.tables):
                logger.debug(f"Creating table: {table_name}")
                await executor.execute_command(build_create_table_sql(self.tables[table_name]))

            logger.info(f"Schema version {StoreSchema.SCHEMA_VERSION} ready ({len(self.tables)} tables)")

        except AppError as e:
            logger.error(f"Schema creation failed: {e.raw or e.message}")
            raise ServerError("Failed to create database schema", raw=e.raw or e.message) from e
        finally:
            await connection.disconnect()

    async def get_existing_tables(self) -> list[str]:
        connection = SQLiteConnection(self.database_path, self.config)
        await connection.connect()
        try:
            executor = SQLiteQueryExecutor(connection)
            result = await executor.execute_query(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )
            return [row["name"] for row in result.rows]
        finally:
            await connection.disconnect()

    async def validate_schema(self) -> bool:
        existing = set(await self.get_existing_tables())
        missing = sorted(set(self.tables) - existing)
        if missing:
            logger.warning(f"Missing tables: {', '.join(missing)}")
            return False
        return True
