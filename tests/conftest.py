"""Pytest configuration and shared fixtures for the dry-run store.

This module provides:
- A temporary SQLite database with the store schema and committed seed rows
- Transaction runner and repository fixtures bound to that database
- A full-dump helper used to prove that operations leave no trace
- Pytest configuration and markers
"""

import sqlite3
from contextlib import closing
from pathlib import Path

import pytest

from dryrun_store.infrastructure.sqlite import (
    SQLitePurchaseRepository,
    SQLiteResourceRepository,
    SQLiteTransactionRunner,
    StoreSchema,
)
from dryrun_store.infrastructure.sqlite.schema import build_create_table_sql, get_table_creation_order

SEED_STATEMENTS = [
    (
        "INSERT INTO users (id, email, password, admin, active, created_at) VALUES (?, ?, ?, ?, ?, ?)",
        [
            (1, "ana@example.com", "secret123", 1, 1, "2024-01-01 09:00:00"),
            (2, "bob@example.com", "hunter2222", 0, 1, "2024-01-02 09:00:00"),
        ],
    ),
    (
        "INSERT INTO categories (id, name) VALUES (?, ?)",
        [(1, "Books"), (2, "Games")],
    ),
    (
        "INSERT INTO products (id, name, price, category_id) VALUES (?, ?, ?, ?)",
        [(1, "Novel", 12.5, 1), (2, "Chess", 30.0, 2), (3, "Pencil", 9.99, None)],
    ),
    (
        "INSERT INTO purchases (id, buyer_id, total, created_at) VALUES (?, ?, ?, ?)",
        [(1, 1, 25.0, "2024-01-15 10:00:00"), (2, 2, 30.0, "2024-03-01 12:00:00")],
    ),
    (
        "INSERT INTO purchase_items (id, purchase_id, product_id, quantity, price_at_time) VALUES (?, ?, ?, ?, ?)",
        [(1, 1, 1, 2, 12.5), (2, 2, 2, 1, 30.0)],
    ),
]


def dump(database_path: str) -> list[str]:
    """Return every statement needed to rebuild the database, schema and rows."""
    with closing(sqlite3.connect(database_path)) as conn:
        return list(conn.iterdump())


@pytest.fixture
def database_dump():
    """Full-dump function for before/after comparisons."""
    return dump


@pytest.fixture
def temp_database(tmp_path: Path) -> str:
    """Path to a database file that does not exist yet."""
    return str(tmp_path / "db" / "store.sqlite")


@pytest.fixture
def seeded_database(temp_database: str) -> str:
    """Create the store schema and commit the seed rows.

    Returns:
        str: Path to the seeded database file
    """
    Path(temp_database).parent.mkdir(parents=True, exist_ok=True)
    tables = StoreSchema.get_all_tables()

    with closing(sqlite3.connect(temp_database)) as conn:
        for table_name in get_table_creation_order(tables):
            conn.execute(build_create_table_sql(tables[table_name]))
        for sql, rows in SEED_STATEMENTS:
            conn.executemany(sql, rows)
        conn.commit()

    return temp_database


@pytest.fixture
def transaction_runner(seeded_database: str) -> SQLiteTransactionRunner:
    return SQLiteTransactionRunner(seeded_database)


@pytest.fixture
def resource_repository(transaction_runner: SQLiteTransactionRunner) -> SQLiteResourceRepository:
    return SQLiteResourceRepository(transaction_runner)


@pytest.fixture
def purchase_repository(transaction_runner: SQLiteTransactionRunner) -> SQLitePurchaseRepository:
    return SQLitePurchaseRepository(transaction_runner)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test against SQLite"
    )
