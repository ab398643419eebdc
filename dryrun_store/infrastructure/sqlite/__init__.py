"""SQLite concrete implementations for the data access layer."""

from .connection import SQLiteConnection
from .error_classifier import SQLiteErrorClassifier, classify_error
from .purchase_repository import SQLitePurchaseRepository
from .query_builder import SQLiteQueryBuilder, sanitize_identifier
from .query_executor import SQLiteQueryExecutor
from .resource_repository import SQLiteResourceRepository
from .schema import SQLiteSchemaManager, StoreSchema
from .transaction import SimulatedTransaction, SQLiteTransactionRunner, TransactionState

__all__ = [
    "SQLiteConnection",
    "SQLiteErrorClassifier",
    "classify_error",
    "SQLiteQueryBuilder",
    "sanitize_identifier",
    "SQLiteQueryExecutor",
    "SimulatedTransaction",
    "SQLiteTransactionRunner",
    "TransactionState",
    "SQLiteResourceRepository",
    "SQLitePurchaseRepository",
    "SQLiteSchemaManager",
    "StoreSchema",
]
