"""Selected dimensions and measures for one tile being edited."""

import logging

from surveyrock.tiles.classifier import is_numeric
from surveyrock.tiles.sql import generate_sql
from surveyrock.tiles.types import Aggregation, DatabaseField, DimensionField, MeasureField

logger = logging.getLogger(__name__)


def default_alias(field_name: str, aggregation: str) -> str:
    return f"{field_name}_{aggregation}"


def _table_for(field_id: str, table: str | None) -> str | None:
    """Resolve the source table of a selected field.

    Fields restored from older configs may lack the table, in which case
    the table part of a dotted fieldId is used.
    """
    if table:
        return table
    if "." in field_id:
        return field_id.rsplit(".", 1)[0]
    return None


class SelectionSet:
    """Ordered, deduplicated dimension and measure lists.

    Insertion order is significant: it is the SELECT column order and the
    GROUP BY order of the generated SQL. The fieldId -> table lookup is
    derived from the current lists on every access, so removed fields never
    linger in it.
    """

    def __init__(
        self,
        dimensions: list[DimensionField] | None = None,
        measures: list[MeasureField] | None = None,
    ):
        self.dimensions: list[DimensionField] = list(dimensions or [])
        self.measures: list[MeasureField] = list(measures or [])

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    def add_dimension(self, field: DatabaseField) -> bool:
        """Append a dimension. Returns False if it was already selected."""
        field_id = field.field_id
        if any(d.field_id == field_id for d in self.dimensions):
            return False
        self.dimensions.append(
            DimensionField(field_id=field_id, field_name=field.name, table=field.table)
        )
        return True

    def remove_dimension(self, index: int) -> None:
        if 0 <= index < len(self.dimensions):
            del self.dimensions[index]

    # ------------------------------------------------------------------
    # Measures
    # ------------------------------------------------------------------

    def add_measure(self, field: DatabaseField) -> bool:
        """Append a measure with the default sum aggregation.

        The numeric check is repeated here because the caller's field list
        may have been replaced since it was rendered.
        """
        if not is_numeric(field):
            logger.debug("Rejected non-numeric measure %s (%s)", field.field_id, field.type)
            return False
        field_id = field.field_id
        if any(m.field_id == field_id for m in self.measures):
            return False
        aggregation = Aggregation.SUM.value
        self.measures.append(
            MeasureField(
                field_id=field_id,
                field_name=field.name,
                aggregation=aggregation,
                alias=default_alias(field.name, aggregation),
                table=field.table,
            )
        )
        return True

    def remove_measure(self, index: int) -> None:
        if 0 <= index < len(self.measures):
            del self.measures[index]

    def set_aggregation(self, index: int, aggregation: str) -> None:
        """Change a measure's aggregation.

        The value is not checked against Aggregation; callers offer a fixed
        choice list. A default alias follows the new aggregation, a custom
        one is kept.
        """
        if not 0 <= index < len(self.measures):
            return
        measure = self.measures[index]
        if measure.alias is None or measure.alias == default_alias(
            measure.field_name, measure.aggregation
        ):
            measure.alias = default_alias(measure.field_name, aggregation)
        measure.aggregation = aggregation

    def set_alias(self, index: int, alias: str | None) -> None:
        """Set a custom alias. A blank alias restores the default."""
        if not 0 <= index < len(self.measures):
            return
        measure = self.measures[index]
        if alias and alias.strip():
            measure.alias = alias.strip()
        else:
            measure.alias = default_alias(measure.field_name, measure.aggregation)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def field_table_map(self) -> dict[str, str]:
        mapping: dict[str, str] = {}
        for item in [*self.dimensions, *self.measures]:
            table = _table_for(item.field_id, item.table)
            if table:
                mapping[item.field_id] = table
        return mapping

    def resolve_tables(self, fields: list[DatabaseField]) -> None:
        """Fill in the table of selected fields saved without one.

        Older tiles store measures as {fieldId: name} with no table; these
        are matched by column name against a freshly loaded field list.
        """
        by_name: dict[str, str] = {}
        for field in fields:
            by_name.setdefault(field.name, field.table)
        for item in [*self.dimensions, *self.measures]:
            if _table_for(item.field_id, item.table) is None and item.field_name in by_name:
                item.table = by_name[item.field_name]

    def is_empty(self) -> bool:
        return not self.dimensions and not self.measures

    def clear(self) -> None:
        self.dimensions.clear()
        self.measures.clear()

    def to_sql(self) -> str:
        return generate_sql(self.dimensions, self.measures, self.field_table_map)
