"""
Per-resource services for users, categories, products and purchases.

Each service is bound to one table and forwards to the resource
repository; every call is one simulated transaction, so nothing a
service does is persisted.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from dryrun_store.domain.entities import Filter, FilterOperator
from dryrun_store.domain.exceptions import ClientError, NotFoundError
from dryrun_store.infrastructure.sqlite.purchase_repository import SQLitePurchaseRepository
from dryrun_store.infrastructure.sqlite.resource_repository import Filters, Row, SQLiteResourceRepository

from .base_service import BaseApplicationService


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ResourceService(BaseApplicationService):
    """CRUD use cases for a single table."""

    table: str = ""
    resource_name: str = "resource"

    def __init__(self, repository: SQLiteResourceRepository, table: Optional[str] = None):
        super().__init__()
        self.repository = repository
        if table is not None:
            self.table = table
        if not self.table:
            raise ClientError("Invalid table name")

    @property
    def not_found_message(self) -> str:
        return f"No {self.resource_name} found"

    def _validate_id(self, record_id: Any) -> None:
        if not _is_positive_int(record_id):
            raise ClientError(f"Invalid {self.resource_name} ID")

    def _validate_limit(self, limit: Any) -> None:
        if limit is not None and not _is_positive_int(limit):
            raise ClientError("Invalid limit parameter")

    async def list(
        self,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Filters] = None,
        limit: Optional[int] = None,
    ) -> list[Row]:
        """List matching rows.

        Raises:
            NotFoundError: If no row matches
        """
        self._validate_limit(limit)
        rows = await self._execute_operation(
            "list",
            lambda: self.repository.fetch_many(self.table, columns, filters, limit),
            context=self.table,
        )
        if not rows:
            raise NotFoundError(self.not_found_message)
        return rows

    async def get(self, record_id: int, columns: Optional[Sequence[str]] = None) -> Row:
        """Fetch one row.

        Raises:
            NotFoundError: If no row has this id
        """
        self._validate_id(record_id)
        row = await self._execute_operation(
            "get",
            lambda: self.repository.fetch_by_id(self.table, record_id, columns),
            context=f"{self.table} id={record_id}",
        )
        if row is None:
            raise NotFoundError(self.not_found_message)
        return row

    async def create(self, data: Mapping[str, Any]) -> Row:
        self._validate_required_params({"data": data})
        return await self._execute_operation(
            "create",
            lambda: self.repository.insert(self.table, data),
            context=self.table,
        )

    async def update(self, record_id: int, patch: Mapping[str, Any]) -> Row:
        self._validate_id(record_id)
        return await self._execute_operation(
            "update",
            lambda: self.repository.update(self.table, record_id, patch),
            context=f"{self.table} id={record_id}",
        )

    async def delete(self, record_id: int) -> dict[str, Any]:
        self._validate_id(record_id)
        return await self._execute_operation(
            "delete",
            lambda: self.repository.delete_by_id(self.table, record_id),
            context=f"{self.table} id={record_id}",
        )

    async def toggle(self, record_id: int, column: str) -> Row:
        """Flip a 0/1 column of one row."""
        self._validate_id(record_id)
        return await self._execute_operation(
            "toggle",
            lambda: self.repository.toggle_boolean(self.table, record_id, column),
            context=f"{self.table}.{column} id={record_id}",
        )


class CategoryService(ResourceService):
    table = "categories"
    resource_name = "category"


class ProductService(ResourceService):
    table = "products"
    resource_name = "product"


class UserService(ResourceService):
    """User use cases, including flag toggles and password change."""

    table = "users"
    resource_name = "user"

    @property
    def not_found_message(self) -> str:
        return "No users found"

    async def toggle_active(self, user_id: int) -> Row:
        return await self.toggle(user_id, "active")

    async def toggle_admin(self, user_id: int) -> Row:
        return await self.toggle(user_id, "admin")

    async def change_password(self, user_id: int, actual_password: str, new_password: str) -> Row:
        """Replace the password after checking the current one.

        Raises:
            NotFoundError: If the user does not exist
            ClientError: If ``actual_password`` does not match
        """
        user = await self.get(user_id, ["password"])
        if user["password"] != actual_password:
            raise ClientError("Incorrect password")
        return await self.update(user_id, {"password": new_password})


class PurchaseService(ResourceService):
    """Purchase use cases; purchases are read and created with their items."""

    table = "purchases"
    resource_name = "purchase"

    def __init__(self, repository: SQLitePurchaseRepository, table: Optional[str] = None):
        super().__init__(repository, table)

    async def list(
        self,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Filters] = None,
        limit: Optional[int] = None,
        min_date: Optional[str] = None,
        max_date: Optional[str] = None,
    ) -> list[Row]:
        """List purchase headers, optionally bounded by ``created_at``."""
        conditions = list(filters or [])
        if min_date:
            conditions.append(Filter("created_at", FilterOperator.GE, min_date))
        if max_date:
            conditions.append(Filter("created_at", FilterOperator.LE, max_date))
        return await super().list(columns, conditions, limit)

    async def get(self, record_id: int, columns: Optional[Sequence[str]] = None) -> Row:
        """Fetch a purchase with its nested items.

        Raises:
            NotFoundError: If no purchase has this id
        """
        self._validate_id(record_id)
        purchase = await self._execute_operation(
            "get",
            lambda: self.repository.fetch_purchase_with_items(record_id, columns),
            context=f"id={record_id}",
        )
        if purchase is None:
            raise NotFoundError(self.not_found_message)
        return purchase

    async def create(self, data: Mapping[str, Any]) -> Row:
        """Simulate a purchase of ``data["products"]`` for ``data["buyer_id"]``."""
        self._validate_required_params({"buyer_id": data.get("buyer_id"), "products": data.get("products")})
        if not data["products"]:
            raise ClientError("At least one product is required.")
        return await self._execute_operation(
            "create",
            lambda: self.repository.create_purchase_with_items(data),
            context=f"buyer_id={data.get('buyer_id')}",
        )


def create_resource_services(
    resource_repository: SQLiteResourceRepository,
    purchase_repository: SQLitePurchaseRepository,
) -> dict[str, ResourceService]:
    """Build the service registry keyed by table name."""
    return {
        "users": UserService(resource_repository),
        "categories": CategoryService(resource_repository),
        "products": ProductService(resource_repository),
        "purchases": PurchaseService(purchase_repository),
    }
