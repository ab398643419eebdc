"""SQLite schema management components."""

from .schema_definitions import StoreSchema
from .schema_manager import SQLiteSchemaManager, build_create_table_sql, get_table_creation_order

__all__ = [
    "StoreSchema",
    "SQLiteSchemaManager",
    "build_create_table_sql",
    "get_table_creation_order",
]
