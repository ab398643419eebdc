"""Purchase operations composed from the generic resource primitives."""

from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from dryrun_store.domain.entities import Filter, FilterOperator
from dryrun_store.infrastructure.data_access.query_executor import QueryExecutor

from .resource_repository import Row, SQLiteResourceRepository

PURCHASES_TABLE = "purchases"
PURCHASE_ITEMS_TABLE = "purchase_items"
PRODUCTS_TABLE = "products"

_CENT = Decimal("0.01")

PURCHASE_ITEMS_VIEW_SQL = """
SELECT
    pi.id AS item_id,
    pi.product_id AS product_id,
    pi.quantity AS quantity,
    pi.price_at_time AS price_at_time,
    p.name AS product_name,
    p.price AS product_price,
    c.id AS category_id,
    c.name AS category_name
FROM purchase_items pi
JOIN products p ON p.id = pi.product_id
LEFT JOIN categories c ON c.id = p.category_id
WHERE pi.purchase_id = ?
ORDER BY pi.id
"""


def _to_decimal(value: Any) -> Decimal:
    return Decimal(str(value))


def _nest_item(row: Row) -> dict[str, Any]:
    category = None
    if row["category_id"] is not None:
        category = {"id": row["category_id"], "name": row["category_name"]}

    return {
        "id": row["item_id"],
        "product_id": row["product_id"],
        "quantity": row["quantity"],
        "price_at_time": row["price_at_time"],
        "product": {
            "id": row["product_id"],
            "name": row["product_name"],
            "price": row["product_price"],
            "category": category,
        },
    }


class SQLitePurchaseRepository(SQLiteResourceRepository):
    """Dry-run purchase creation and purchase-with-items reads."""

    async def load_purchase_items(self, executor: QueryExecutor, purchase_id: Any) -> list[dict[str, Any]]:
        rows = await self.query_rows(executor, PURCHASE_ITEMS_VIEW_SQL, [purchase_id])
        return [_nest_item(row) for row in rows]

    async def _load_purchase(
        self, executor: QueryExecutor, purchase_id: Any, columns: Optional[Sequence[str]] = None
    ) -> Optional[dict[str, Any]]:
        purchase = await self.select_row_by_id(executor, PURCHASES_TABLE, purchase_id, columns)
        if purchase is None:
            return None

        purchase["items"] = await self.load_purchase_items(executor, purchase_id)
        return purchase

    async def _create_purchase(self, executor: QueryExecutor, purchase_data: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        lines = list(purchase_data.get("products") or [])
        product_ids = list({line["product_id"] for line in lines})

        products = await self.select_rows(
            executor,
            PRODUCTS_TABLE,
            ["id", "price"],
            [Filter("id", FilterOperator.IN, product_ids)],
        )
        price_by_id = {product["id"]: product["price"] for product in products}

        # Prices are snapshotted now; later product price changes do not affect the purchase.
        # An unknown product_id raises KeyError here.
        items = []
        total = Decimal("0")
        for line in lines:
            price_at_time = price_by_id[line["product_id"]]
            quantity = line["quantity"]
            total += _to_decimal(price_at_time) * _to_decimal(quantity)
            items.append({"product_id": line["product_id"], "quantity": quantity, "price_at_time": price_at_time})

        header = {key: value for key, value in purchase_data.items() if key != "products"}
        header["total"] = float(total.quantize(_CENT, rounding=ROUND_HALF_UP))

        purchase_id = await self.insert_row(executor, PURCHASES_TABLE, header)
        for item in items:
            item["purchase_id"] = purchase_id
        if items:
            await self.insert_rows(executor, PURCHASE_ITEMS_TABLE, items)

        self.logger.debug(
            f"{self._log_prefix} simulated purchase {purchase_id}: {len(items)} items, total {header['total']}"
        )
        return await self._load_purchase(executor, purchase_id)

    async def create_purchase_with_items(self, purchase_data: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        """Simulate a purchase and return it with its items.

        Args:
            purchase_data: ``{"buyer_id": ..., "products": [{"product_id", "quantity"}, ...]}``;
                every key except ``products`` is stored on the purchase header

        Returns:
            The purchase row with ``total`` and nested ``items``
        """
        return await self.transaction_runner.run_simulated(self._create_purchase, purchase_data)

    async def fetch_purchase_with_items(
        self, purchase_id: Any, columns: Optional[Sequence[str]] = None
    ) -> Optional[dict[str, Any]]:
        """Fetch a purchase with its items, or None when it does not exist."""
        return await self.transaction_runner.run_simulated(self._load_purchase, purchase_id, columns)
