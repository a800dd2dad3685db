"""SQL synthesis from a dimension/measure selection.

The generated statement is a preview/candidate query. Identifiers are
interpolated as-is and multi-table selections are not joined: the FROM
clause names the first table and carries a marker listing every table
that still needs JOIN logic.
"""

from collections.abc import Mapping, Sequence

from surveyrock.tiles.types import DimensionField, MeasureField

UNKNOWN_TABLE = "unknown_table"


def join_marker(tables: Sequence[str]) -> str:
    return f"/* JOIN required: {', '.join(tables)} */"


def generate_sql(
    dimensions: Sequence[DimensionField],
    measures: Sequence[MeasureField],
    field_table_map: Mapping[str, str],
) -> str:
    """Build a single SELECT statement, or "" when the selection is incomplete.

    Args:
        dimensions: Grouping fields, in selection order
        measures: Aggregated fields, in selection order
        field_table_map: fieldId -> source table

    Returns:
        The SQL string
    """
    if not dimensions or not measures:
        return ""

    tables: list[str] = []
    dimension_columns: list[str] = []
    measure_columns: list[str] = []

    for dim in dimensions:
        table = field_table_map.get(dim.field_id) or UNKNOWN_TABLE
        if table not in tables:
            tables.append(table)
        dimension_columns.append(f"{table}.{dim.field_name}")

    for measure in measures:
        table = field_table_map.get(measure.field_id) or UNKNOWN_TABLE
        if table not in tables:
            tables.append(table)
        alias = measure.alias or measure.field_name
        measure_columns.append(
            f"{measure.aggregation}({table}.{measure.field_name}) as {alias}"
        )

    parts = [f"SELECT {', '.join(dimension_columns + measure_columns)}"]

    from_clause = f"FROM {tables[0]}"
    if len(tables) > 1:
        from_clause = f"{from_clause} {join_marker(tables)}"
    parts.append(from_clause)

    if dimension_columns:
        parts.append(f"GROUP BY {', '.join(dimension_columns)}")

    return " ".join(parts)
