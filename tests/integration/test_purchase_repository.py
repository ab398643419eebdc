"""Integration tests for dry-run purchases."""

import sqlite3
from contextlib import closing

import pytest

from dryrun_store.domain.exceptions import ClientError, ServerError

pytestmark = pytest.mark.integration


@pytest.fixture
def eraser_product(seeded_database):
    """Commit a product whose price makes half-cent line totals."""
    with closing(sqlite3.connect(seeded_database)) as conn:
        conn.execute("INSERT INTO products (id, name, price, category_id) VALUES (4, 'Eraser', 1.15, 2)")
        conn.commit()
    return 4


class TestCreatePurchase:
    """Test cases for create_purchase_with_items."""

    @pytest.mark.asyncio
    async def test_single_line(self, purchase_repository):
        purchase = await purchase_repository.create_purchase_with_items(
            {"buyer_id": 1, "products": [{"product_id": 3, "quantity": 2}]}
        )

        assert purchase["id"] == 3
        assert purchase["buyer_id"] == 1
        assert purchase["total"] == 19.98
        assert purchase["items"] == [
            {
                "id": 3,
                "product_id": 3,
                "quantity": 2,
                "price_at_time": 9.99,
                "product": {"id": 3, "name": "Pencil", "price": 9.99, "category": None},
            }
        ]

    @pytest.mark.asyncio
    async def test_several_lines(self, purchase_repository):
        purchase = await purchase_repository.create_purchase_with_items(
            {
                "buyer_id": 2,
                "products": [{"product_id": 1, "quantity": 2}, {"product_id": 2, "quantity": 1}],
            }
        )

        assert purchase["total"] == 55.0
        assert [item["product_id"] for item in purchase["items"]] == [1, 2]
        assert purchase["items"][0]["product"]["category"] == {"id": 1, "name": "Books"}
        assert purchase["items"][1]["price_at_time"] == 30.0

    @pytest.mark.asyncio
    async def test_total_is_rounded_to_cents(self, purchase_repository):
        purchase = await purchase_repository.create_purchase_with_items(
            {"buyer_id": 1, "products": [{"product_id": 3, "quantity": 3}, {"product_id": 1, "quantity": 1}]}
        )
        assert purchase["total"] == 42.47

    @pytest.mark.asyncio
    async def test_float_quantity(self, purchase_repository):
        purchase = await purchase_repository.create_purchase_with_items(
            {"buyer_id": 1, "products": [{"product_id": 3, "quantity": 2.0}]}
        )

        assert purchase["total"] == 19.98
        assert purchase["items"][0]["quantity"] == 2
        assert purchase["items"][0]["price_at_time"] == 9.99

    @pytest.mark.asyncio
    async def test_fractional_price_and_quantity_round_half_up(self, purchase_repository, eraser_product):
        purchase = await purchase_repository.create_purchase_with_items(
            {"buyer_id": 2, "products": [{"product_id": eraser_product, "quantity": 1.5}]}
        )

        # 1.15 * 1.5 is exactly 1.725
        assert purchase["total"] == 1.73
        assert purchase["items"][0]["quantity"] == 1.5
        assert purchase["items"][0]["price_at_time"] == 1.15

    @pytest.mark.asyncio
    async def test_mixed_quantity_types(self, purchase_repository, eraser_product):
        purchase = await purchase_repository.create_purchase_with_items(
            {
                "buyer_id": 1,
                "products": [
                    {"product_id": 1, "quantity": 2},
                    {"product_id": eraser_product, "quantity": 0.5},
                ],
            }
        )

        # 25 + 0.575
        assert purchase["total"] == 25.58

    @pytest.mark.asyncio
    async def test_price_is_snapshotted_from_product(self, purchase_repository):
        purchase = await purchase_repository.create_purchase_with_items(
            {"buyer_id": 1, "products": [{"product_id": 2, "quantity": 1, "price_at_time": 0.01}]}
        )

        assert purchase["items"][0]["price_at_time"] == 30.0
        assert purchase["total"] == 30.0

    @pytest.mark.asyncio
    async def test_purchase_is_rolled_back(self, purchase_repository):
        created = await purchase_repository.create_purchase_with_items(
            {"buyer_id": 1, "products": [{"product_id": 3, "quantity": 2}]}
        )

        assert await purchase_repository.fetch_purchase_with_items(created["id"]) is None
        assert len(await purchase_repository.fetch_many("purchase_items")) == 2

    @pytest.mark.asyncio
    async def test_unknown_product_is_not_guarded(self, purchase_repository):
        with pytest.raises(ServerError) as exc_info:
            await purchase_repository.create_purchase_with_items(
                {"buyer_id": 1, "products": [{"product_id": 99, "quantity": 1}]}
            )

        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, KeyError)

    @pytest.mark.asyncio
    async def test_unknown_buyer(self, purchase_repository):
        with pytest.raises(ClientError) as exc_info:
            await purchase_repository.create_purchase_with_items(
                {"buyer_id": 99, "products": [{"product_id": 1, "quantity": 1}]}
            )

        assert exc_info.value.message.startswith("Foreign key constraint failed")

    @pytest.mark.asyncio
    async def test_invalid_quantity(self, purchase_repository):
        with pytest.raises(ClientError) as exc_info:
            await purchase_repository.create_purchase_with_items(
                {"buyer_id": 1, "products": [{"product_id": 1, "quantity": 0}]}
            )

        assert exc_info.value.message.endswith("does not satisfy the validation constraint.")


class TestFetchPurchase:
    """Test cases for fetch_purchase_with_items."""

    @pytest.mark.asyncio
    async def test_existing_purchase(self, purchase_repository):
        purchase = await purchase_repository.fetch_purchase_with_items(1)

        assert purchase["total"] == 25.0
        assert purchase["items"] == [
            {
                "id": 1,
                "product_id": 1,
                "quantity": 2,
                "price_at_time": 12.5,
                "product": {"id": 1, "name": "Novel", "price": 12.5, "category": {"id": 1, "name": "Books"}},
            }
        ]

    @pytest.mark.asyncio
    async def test_header_columns(self, purchase_repository):
        purchase = await purchase_repository.fetch_purchase_with_items(2, ["buyer_id", "total"])

        assert purchase["buyer_id"] == 2
        assert "created_at" not in purchase
        assert len(purchase["items"]) == 1

    @pytest.mark.asyncio
    async def test_missing_purchase(self, purchase_repository):
        assert await purchase_repository.fetch_purchase_with_items(99) is None
