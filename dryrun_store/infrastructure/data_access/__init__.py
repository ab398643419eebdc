"""Data Access Layer abstractions.

This module provides abstract interfaces for all database operations,
following the Repository pattern and enabling dependency injection.
"""

from .connection import DatabaseConnection, TransactionRunner, UnitOfWork
from .query_executor import QueryExecutor, QueryResult
from .schema_manager import SchemaManager, TableDefinition

__all__ = [
    "DatabaseConnection",
    "TransactionRunner",
    "UnitOfWork",
    "QueryExecutor",
    "QueryResult",
    "SchemaManager",
    "TableDefinition",
]
