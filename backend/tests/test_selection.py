"""Tests for dimension and measure selection."""

from surveyrock.tiles.selection import SelectionSet, default_alias
from surveyrock.tiles.types import DatabaseField, DimensionField, MeasureField

REGION = DatabaseField(name="region", type="varchar", table="orders")
AMOUNT = DatabaseField(name="amount", type="numeric", table="orders")
QTY = DatabaseField(name="qty", type="integer", table="orders")
COUNTRY = DatabaseField(name="country", type="text", table="customers")


class TestDimensions:
    def test_add_dimension_is_idempotent(self):
        selection = SelectionSet()
        assert selection.add_dimension(REGION) is True
        assert selection.add_dimension(REGION) is False
        assert len(selection.dimensions) == 1

    def test_dimension_keeps_field_id_and_table(self):
        selection = SelectionSet()
        selection.add_dimension(REGION)
        dim = selection.dimensions[0]
        assert dim.field_id == "orders.region"
        assert dim.field_name == "region"
        assert dim.table == "orders"

    def test_remove_out_of_range_is_noop(self):
        selection = SelectionSet()
        selection.add_dimension(REGION)
        selection.remove_dimension(5)
        selection.remove_dimension(-1)
        assert len(selection.dimensions) == 1

    def test_remove_dimension(self):
        selection = SelectionSet()
        selection.add_dimension(REGION)
        selection.add_dimension(COUNTRY)
        selection.remove_dimension(0)
        assert [d.field_name for d in selection.dimensions] == ["country"]


class TestMeasures:
    def test_add_measure_defaults(self):
        selection = SelectionSet()
        assert selection.add_measure(AMOUNT) is True
        measure = selection.measures[0]
        assert measure.aggregation == "sum"
        assert measure.alias == "amount_sum"

    def test_non_numeric_measure_rejected(self):
        selection = SelectionSet()
        assert selection.add_measure(REGION) is False
        assert selection.measures == []

    def test_duplicate_measure_rejected(self):
        selection = SelectionSet()
        selection.add_measure(AMOUNT)
        assert selection.add_measure(AMOUNT) is False
        assert len(selection.measures) == 1

    def test_set_aggregation_rederives_default_alias(self):
        selection = SelectionSet()
        selection.add_measure(AMOUNT)
        selection.set_aggregation(0, "avg")
        assert selection.measures[0].aggregation == "avg"
        assert selection.measures[0].alias == "amount_avg"

    def test_set_aggregation_keeps_custom_alias(self):
        selection = SelectionSet()
        selection.add_measure(AMOUNT)
        selection.set_alias(0, "revenue")
        selection.set_aggregation(0, "max")
        assert selection.measures[0].alias == "revenue"

    def test_blank_alias_restores_default(self):
        selection = SelectionSet()
        selection.add_measure(AMOUNT)
        selection.set_alias(0, "revenue")
        selection.set_alias(0, "   ")
        assert selection.measures[0].alias == "amount_sum"

    def test_set_aggregation_out_of_range_is_noop(self):
        selection = SelectionSet()
        selection.add_measure(AMOUNT)
        selection.set_aggregation(3, "avg")
        assert selection.measures[0].aggregation == "sum"

    def test_remove_measure(self):
        selection = SelectionSet()
        selection.add_measure(AMOUNT)
        selection.add_measure(QTY)
        selection.remove_measure(0)
        assert [m.field_name for m in selection.measures] == ["qty"]


class TestFieldTableMap:
    def test_map_covers_current_selection(self):
        selection = SelectionSet()
        selection.add_dimension(REGION)
        selection.add_measure(AMOUNT)
        assert selection.field_table_map == {"orders.region": "orders", "orders.amount": "orders"}

    def test_removed_fields_leave_the_map(self):
        selection = SelectionSet()
        selection.add_dimension(REGION)
        selection.add_dimension(COUNTRY)
        selection.remove_dimension(1)
        assert "customers.country" not in selection.field_table_map

    def test_table_from_dotted_field_id(self):
        selection = SelectionSet(
            dimensions=[DimensionField(field_id="public.orders.region", field_name="region")],
            measures=[MeasureField(field_id="legacy", field_name="legacy")],
        )
        assert selection.field_table_map == {"public.orders.region": "public.orders"}

    def test_undotted_field_table_resolved_by_name(self):
        selection = SelectionSet(
            dimensions=[DimensionField(field_id="orders.region", field_name="region", table="orders")],
            measures=[MeasureField(field_id="amount", field_name="amount")],
        )
        assert "amount" not in selection.field_table_map
        selection.resolve_tables([REGION, AMOUNT, COUNTRY])
        assert selection.field_table_map["amount"] == "orders"

    def test_unmatched_field_stays_unresolved(self):
        selection = SelectionSet(measures=[MeasureField(field_id="legacy", field_name="legacy")])
        selection.resolve_tables([REGION, AMOUNT])
        assert selection.field_table_map == {}


class TestSelectionSql:
    def test_to_sql_uses_selection(self):
        selection = SelectionSet()
        selection.add_dimension(REGION)
        selection.add_measure(AMOUNT)
        assert selection.to_sql() == (
            "SELECT orders.region, sum(orders.amount) as amount_sum "
            "FROM orders GROUP BY orders.region"
        )

    def test_clear(self):
        selection = SelectionSet()
        selection.add_dimension(REGION)
        selection.add_measure(AMOUNT)
        selection.clear()
        assert selection.is_empty()
        assert selection.to_sql() == ""


def test_default_alias():
    assert default_alias("amount", "count") == "amount_count"
