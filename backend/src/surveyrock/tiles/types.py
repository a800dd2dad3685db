"""Tile editor types.

Two tile-kind vocabularies coexist:
- UiTileKind: what the editor offers (chart, table, metric, text, query)
- PersistedTileKind: what the backend stores (chart, text, kpi)

The mapping UI -> backend is lossy, so the UI kind and UI chart type are
carried inside the configuration payload (uiType, uiChartType).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class UiTileKind(str, Enum):
    CHART = "chart"
    TABLE = "table"
    METRIC = "metric"
    TEXT = "text"
    QUERY = "query"


class PersistedTileKind(str, Enum):
    CHART = "chart"
    TEXT = "text"
    KPI = "kpi"


class Aggregation(str, Enum):
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"
    COUNT = "count"


class TextRowType(str, Enum):
    HEADER = "header"
    SUBHEADER = "subheader"
    TEXT = "text"


# Chart types the backend accepts
BACKEND_CHART_TYPES = ("bar", "line", "pie", "donut")

# Chart styles the editor offers (table is UI only)
UI_CHART_TYPES = BACKEND_CHART_TYPES + ("table",)

DEFAULT_CHART_TYPE = "bar"

UI_TO_BACKEND_KIND: dict[UiTileKind, PersistedTileKind] = {
    UiTileKind.CHART: PersistedTileKind.CHART,
    UiTileKind.TABLE: PersistedTileKind.CHART,
    UiTileKind.METRIC: PersistedTileKind.KPI,
    UiTileKind.TEXT: PersistedTileKind.TEXT,
    UiTileKind.QUERY: PersistedTileKind.TEXT,
}

# Legacy fallback for tiles saved without a uiType tag
BACKEND_TO_UI_KIND: dict[PersistedTileKind, UiTileKind] = {
    PersistedTileKind.CHART: UiTileKind.CHART,
    PersistedTileKind.TEXT: UiTileKind.TEXT,
    PersistedTileKind.KPI: UiTileKind.METRIC,
}


@dataclass
class DatabaseField:
    """A column of a table in a schema snapshot."""

    name: str
    type: str
    table: str
    description: str = ""

    @property
    def field_id(self) -> str:
        return f"{self.table}.{self.name}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "table": self.table,
            "description": self.description,
        }


@dataclass
class DimensionField:
    """A grouping field selected for a tile."""

    field_id: str
    field_name: str
    aggregation: str | None = None
    table: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"fieldId": self.field_id, "fieldName": self.field_name}
        if self.aggregation:
            data["aggregation"] = self.aggregation
        if self.table:
            data["table"] = self.table
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DimensionField":
        return cls(
            field_id=data["fieldId"],
            field_name=data.get("fieldName") or data["fieldId"],
            aggregation=data.get("aggregation"),
            table=data.get("table"),
        )


@dataclass
class MeasureField:
    """An aggregated numeric field selected for a tile."""

    field_id: str
    field_name: str
    aggregation: str = Aggregation.SUM.value
    alias: str | None = None
    table: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "fieldId": self.field_id,
            "fieldName": self.field_name,
            "aggregation": self.aggregation,
        }
        if self.alias:
            data["alias"] = self.alias
        if self.table:
            data["table"] = self.table
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MeasureField":
        return cls(
            field_id=data["fieldId"],
            field_name=data.get("fieldName") or data["fieldId"],
            aggregation=data.get("aggregation") or Aggregation.SUM.value,
            alias=data.get("alias"),
            table=data.get("table"),
        )


@dataclass
class TextRow:
    """One row of a text tile. Query rows hold raw SQL run at render time."""

    id: str
    type: str = TextRowType.TEXT.value
    content: str = ""
    is_query: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "content": self.content,
            "isQuery": self.is_query,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TextRow":
        return cls(
            id=str(data["id"]),
            type=data.get("type") or TextRowType.TEXT.value,
            content=data.get("content") or "",
            is_query=bool(data.get("isQuery", False)),
        )


@dataclass
class TileConfiguration:
    """The opaque config payload persisted with a tile.

    Only the attributes belonging to the tile's shape are populated;
    to_dict() omits the rest.
    """

    ui_type: UiTileKind
    chart_type: str | None = None
    ui_chart_type: str | None = None
    dimensions: list[DimensionField] | None = None
    measures: list[MeasureField] | None = None
    measure: MeasureField | None = None
    text_rows: list[TextRow] | None = None
    custom_query: str | None = None
    is_query_mode: bool | None = None
    connection_id: str | None = None
    sql_query: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def backend_kind(self) -> PersistedTileKind:
        return UI_TO_BACKEND_KIND[self.ui_type]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase config payload."""
        data: dict[str, Any] = dict(self.extra)
        if self.chart_type is not None:
            data["chartType"] = self.chart_type
        if self.ui_chart_type is not None:
            data["uiChartType"] = self.ui_chart_type
        if self.dimensions is not None:
            data["dimensions"] = [d.to_dict() for d in self.dimensions]
        if self.measures is not None:
            data["measures"] = [m.to_dict() for m in self.measures]
        if self.measure is not None:
            data["measure"] = self.measure.to_dict()
        if self.text_rows is not None:
            data["textRows"] = [r.to_dict() for r in self.text_rows]
        if self.custom_query is not None:
            data["customQuery"] = self.custom_query
        if self.is_query_mode is not None:
            data["isQueryMode"] = self.is_query_mode
        if self.connection_id:
            data["connectionId"] = self.connection_id
        if self.sql_query is not None:
            data["metadata"] = {**data.get("metadata", {}), "sqlQuery": self.sql_query}
        data["uiType"] = self.ui_type.value
        return data
