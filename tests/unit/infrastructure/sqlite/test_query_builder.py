"""Unit tests for identifier sanitization and statement building."""

import pytest

from dryrun_store.domain.entities import Filter
from dryrun_store.domain.exceptions import ClientError
from dryrun_store.infrastructure.sqlite.query_builder import SQLiteQueryBuilder, sanitize_identifier


class TestSanitizeIdentifier:
    """Test cases for sanitize_identifier."""

    def test_wraps_in_double_quotes(self):
        assert sanitize_identifier("email") == '"email"'

    def test_wildcard_is_unchanged(self):
        assert sanitize_identifier("*") == "*"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("na'me", '"name"'),
            ('na"me', '"name"'),
            ("na`me", '"name"'),
            ('users"; DROP TABLE users; --', '"users; DROP TABLE users; --"'),
            ("\"'`", '""'),
        ],
    )
    def test_strips_quote_characters(self, raw, expected):
        assert sanitize_identifier(raw) == expected

    def test_builder_exposes_sanitizer(self):
        assert SQLiteQueryBuilder.sanitize("price") == '"price"'


class TestSQLiteQueryBuilder:
    """Test cases for SQLiteQueryBuilder."""

    @pytest.fixture
    def builder(self):
        return SQLiteQueryBuilder()

    def test_select_all(self, builder):
        assert builder.build_select("users") == ('SELECT * FROM "users"', [])

    def test_select_columns(self, builder):
        sql, params = builder.build_select("users", ["id", "email"])

        assert sql == 'SELECT "id", "email" FROM "users"'
        assert params == []

    @pytest.mark.parametrize("columns", [None, [], "id", {"id": 1}])
    def test_columns_default_to_wildcard(self, builder, columns):
        sql, _ = builder.build_select("users", columns)
        assert sql == 'SELECT * FROM "users"'

    @pytest.mark.parametrize("table", ["", "   ", None, 42, ["users"]])
    def test_invalid_table(self, builder, table):
        with pytest.raises(ClientError) as exc_info:
            builder.build_select(table)

        assert exc_info.value.message == "Invalid table name"

    def test_single_filter(self, builder):
        sql, params = builder.build_select(
            "products", filters=[{"column": "price", "operator": ">", "value": 10}]
        )

        assert sql == 'SELECT * FROM "products" WHERE "price" > ?'
        assert params == [10]

    def test_filters_joined_with_and(self, builder):
        sql, params = builder.build_select(
            "purchases",
            filters=[
                Filter("created_at", ">=", "2024-01-01"),
                {"column": "created_at", "operator": "<=", "value": "2024-12-31"},
            ],
        )

        assert sql == 'SELECT * FROM "purchases" WHERE "created_at" >= ? AND "created_at" <= ?'
        assert params == ["2024-01-01", "2024-12-31"]

    def test_in_filter_expands_placeholders(self, builder):
        sql, params = builder.build_select("products", ["id", "price"], [Filter("id", "IN", [1, 2, 3])])

        assert sql == 'SELECT "id", "price" FROM "products" WHERE "id" IN (?, ?, ?)'
        assert params == [1, 2, 3]

    def test_filter_column_is_sanitized(self, builder):
        sql, params = builder.build_select("users", filters=[Filter('email" OR 1=1 --', "=", "x")])

        assert sql == 'SELECT * FROM "users" WHERE "email OR 1=1 --" = ?'
        assert params == ["x"]

    def test_invalid_operator_is_rejected(self, builder):
        with pytest.raises(ClientError) as exc_info:
            builder.build_select("users", filters=[{"column": "id", "operator": "OR 1=1 --", "value": 1}])

        assert exc_info.value.message == "Invalid operator 'OR 1=1 --' in filter."

    def test_all_filters_validated_before_building(self, builder):
        with pytest.raises(ClientError):
            builder.build_where([{"column": "id", "operator": "=", "value": 1}, {"column": "id", "operator": "~", "value": 2}])

    def test_empty_filters(self, builder):
        assert builder.build_where(None) == ("", [])
        assert builder.build_where([]) == ("", [])

    def test_limit_applied_when_positive_int(self, builder):
        sql, _ = builder.build_select("users", limit=5)
        assert sql == 'SELECT * FROM "users" LIMIT 5'

    @pytest.mark.parametrize("limit", [0, -1, "5", 2.5, True, None])
    def test_limit_ignored_otherwise(self, builder, limit):
        sql, _ = builder.build_select("users", limit=limit)
        assert sql == 'SELECT * FROM "users"'

    def test_filters_and_limit(self, builder):
        sql, params = builder.build_select("products", ["name"], [Filter("category_id", "=", 1)], 2)

        assert sql == 'SELECT "name" FROM "products" WHERE "category_id" = ? LIMIT 2'
        assert params == [1]

    def test_select_by_id(self, builder):
        assert builder.build_select_by_id("users", 7, ["password"]) == (
            'SELECT "password" FROM "users" WHERE "id" = ?',
            [7],
        )

    def test_insert(self, builder):
        sql, params = builder.build_insert("users", {"email": "a@example.com", "password": "secret123"})

        assert sql == 'INSERT INTO "users" ("email", "password") VALUES (?, ?)'
        assert params == ["a@example.com", "secret123"]

    def test_insert_without_fields(self, builder):
        with pytest.raises(ClientError, match="No fields were passed to insert."):
            builder.build_insert("users", {})

    def test_bulk_insert(self, builder):
        sql, params = builder.build_bulk_insert(
            "purchase_items",
            [{"product_id": 1, "quantity": 2}, {"product_id": 3, "quantity": 4}],
        )

        assert sql == 'INSERT INTO "purchase_items" ("product_id", "quantity") VALUES (?, ?), (?, ?)'
        assert params == [1, 2, 3, 4]

    def test_bulk_insert_binds_each_record_in_its_own_order(self, builder):
        _, params = builder.build_bulk_insert("t", [{"a": 1, "b": 2}, {"b": 3, "a": 4}])
        assert params == [1, 2, 3, 4]

    def test_bulk_insert_without_records(self, builder):
        with pytest.raises(ClientError, match="No records were passed to insert."):
            builder.build_bulk_insert("t", [])

    def test_bulk_insert_with_empty_first_record(self, builder):
        with pytest.raises(ClientError, match="No fields were passed to insert."):
            builder.build_bulk_insert("t", [{}])

    def test_update(self, builder):
        sql, params = builder.build_update("products", 7, {"name": "Board game", "price": 2.5})

        assert sql == 'UPDATE "products" SET "name" = ?, "price" = ? WHERE "id" = ?'
        assert params == ["Board game", 2.5, 7]

    def test_update_without_fields(self, builder):
        with pytest.raises(ClientError, match="No data to update"):
            builder.build_update("products", 7, {})

    def test_toggle(self, builder):
        sql, params = builder.build_toggle("users", 3, "active")

        assert sql == 'UPDATE "users" SET "active" = CASE "active" WHEN 1 THEN 0 ELSE 1 END WHERE "id" = ?'
        assert params == [3]

    @pytest.mark.parametrize("column", ["", "  ", None])
    def test_toggle_invalid_column(self, builder, column):
        with pytest.raises(ClientError, match="Invalid column name"):
            builder.build_toggle("users", 3, column)

    def test_delete(self, builder):
        assert builder.build_delete("categories", 2) == ('DELETE FROM "categories" WHERE "id" = ?', [2])
