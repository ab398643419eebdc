"""Centralized schema definitions for the store database."""

from dryrun_store.infrastructure.data_access.schema_manager import TableDefinition


class StoreSchema:
    """Table definitions for users, catalog and purchases."""

    SCHEMA_VERSION = "1.0.0"

    @classmethod
    def get_all_tables(cls) -> dict[str, TableDefinition]:
        """Get all table definitions for the application schema."""
        return {
            "users": cls.get_users_table(),
            "categories": cls.get_categories_table(),
            "products": cls.get_products_table(),
            "purchases": cls.get_purchases_table(),
            "purchase_items": cls.get_purchase_items_table(),
        }

    @classmethod
    def get_users_table(cls) -> TableDefinition:
        return TableDefinition(
            name="users",
            columns={
                "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
                "email": "TEXT NOT NULL UNIQUE",
                "password": "TEXT NOT NULL",
                "admin": "INTEGER NOT NULL DEFAULT 0 CHECK (admin IN (0, 1))",
                "active": "INTEGER NOT NULL DEFAULT 1 CHECK (active IN (0, 1))",
                "created_at": "TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP",
            },
        )

    @classmethod
    def get_categories_table(cls) -> TableDefinition:
        return TableDefinition(
            name="categories",
            columns={
                "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
                "name": "TEXT NOT NULL UNIQUE",
            },
        )

    @classmethod
    def get_products_table(cls) -> TableDefinition:
        return TableDefinition(
            name="products",
            columns={
                "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
                "name": "TEXT NOT NULL",
                "price": "REAL NOT NULL CHECK (price > 0)",
                "category_id": "INTEGER",
            },
            foreign_keys={"category_id": "categories.id"},
        )

    @classmethod
    def get_purchases_table(cls) -> TableDefinition:
        return TableDefinition(
            name="purchases",
            columns={
                "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
                "buyer_id": "INTEGER NOT NULL",
                "total": "REAL NOT NULL DEFAULT 0",
                "created_at": "TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP",
            },
            foreign_keys={"buyer_id": "users.id"},
        )

    @classmethod
    def get_purchase_items_table(cls) -> TableDefinition:
        return TableDefinition(
            name="purchase_items",
            columns={
                "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
                "purchase_id": "INTEGER NOT NULL",
                "product_id": "INTEGER NOT NULL",
                "quantity": "INTEGER NOT NULL CHECK (quantity > 0)",
                "price_at_time": "REAL NOT NULL",
            },
            foreign_keys={
                "purchase_id": "purchases.id",
                "product_id": "products.id",
            },
        )
