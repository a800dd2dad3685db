"""Tests for SQL synthesis from a field selection."""

from surveyrock.tiles.sql import UNKNOWN_TABLE, generate_sql, join_marker
from surveyrock.tiles.types import DimensionField, MeasureField


def _dim(field_id: str, name: str) -> DimensionField:
    return DimensionField(field_id=field_id, field_name=name)


def _measure(field_id: str, name: str, aggregation: str = "sum", alias: str | None = None) -> MeasureField:
    return MeasureField(field_id=field_id, field_name=name, aggregation=aggregation, alias=alias)


class TestGenerateSql:
    def test_single_table_query(self):
        sql = generate_sql(
            [_dim("orders.region", "region")],
            [_measure("amount", "amount", alias="amount_sum")],
            {"orders.region": "orders", "amount": "orders"},
        )
        assert sql == (
            "SELECT orders.region, sum(orders.amount) as amount_sum "
            "FROM orders GROUP BY orders.region"
        )

    def test_empty_when_no_measures(self):
        assert generate_sql([_dim("orders.region", "region")], [], {"orders.region": "orders"}) == ""

    def test_empty_when_no_dimensions(self):
        assert generate_sql([], [_measure("orders.amount", "amount")], {}) == ""

    def test_columns_follow_selection_order(self):
        sql = generate_sql(
            [_dim("orders.region", "region"), _dim("orders.channel", "channel")],
            [
                _measure("orders.amount", "amount", "avg", "amount_avg"),
                _measure("orders.qty", "qty", "max", "qty_max"),
            ],
            {
                "orders.region": "orders",
                "orders.channel": "orders",
                "orders.amount": "orders",
                "orders.qty": "orders",
            },
        )
        assert sql == (
            "SELECT orders.region, orders.channel, avg(orders.amount) as amount_avg, "
            "max(orders.qty) as qty_max FROM orders GROUP BY orders.region, orders.channel"
        )

    def test_two_tables_get_join_marker(self):
        sql = generate_sql(
            [_dim("customers.country", "country")],
            [_measure("orders.amount", "amount", alias="amount_sum")],
            {"customers.country": "customers", "orders.amount": "orders"},
        )
        assert "FROM customers /* JOIN required: customers, orders */" in sql
        assert sql.endswith("GROUP BY customers.country")

    def test_missing_table_uses_placeholder(self):
        sql = generate_sql([_dim("region", "region")], [_measure("amount", "amount", alias="total")], {})
        assert sql == (
            f"SELECT {UNKNOWN_TABLE}.region, sum({UNKNOWN_TABLE}.amount) as total "
            f"FROM {UNKNOWN_TABLE} GROUP BY {UNKNOWN_TABLE}.region"
        )

    def test_alias_falls_back_to_field_name(self):
        sql = generate_sql(
            [_dim("t.a", "a")], [_measure("t.b", "b", "count")], {"t.a": "t", "t.b": "t"}
        )
        assert "count(t.b) as b" in sql


class TestJoinMarker:
    def test_lists_tables_in_order(self):
        assert join_marker(["a", "b", "c"]) == "/* JOIN required: a, b, c */"
