"""Load tile definitions from YAML files.

A definition pairs a schema snapshot with the tile's selections, which
lets a tile be authored and checked without a live connection:

    schema:
      orders:
        - {name: region, type: varchar}
        - {name: amount, type: numeric}
    tile:
      title: Revenue by region
      kind: chart
      chartType: bar
      connectionId: warehouse
      dimensions: [orders.region]
      measures:
        - field: orders.amount
          aggregation: avg
"""

from pathlib import Path
from typing import Any

import yaml

from surveyrock.tiles.builder import EditorState
from surveyrock.tiles.schema import fields_from_tables
from surveyrock.tiles.types import DEFAULT_CHART_TYPE, DatabaseField, TextRow, UiTileKind


class TileDefinitionError(Exception):
    """Raised when a tile definition cannot be loaded."""

    pass


class TileDefinitionLoader:
    """Builds editor state from a YAML tile definition."""

    def __init__(self, path: Path):
        self.path = path
        self.fields: list[DatabaseField] = []
        self.rejected_measures: list[str] = []

    def load(self) -> EditorState:
        with open(self.path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict) or "tile" not in data:
            raise TileDefinitionError(f"{self.path}: missing 'tile' section")
        self.fields = fields_from_tables(data.get("schema") or {})
        return self._parse_tile(data["tile"])

    def _field(self, field_id: str) -> DatabaseField:
        for field in self.fields:
            if field.field_id == field_id:
                return field
        raise TileDefinitionError(f"{self.path}: unknown field '{field_id}'")

    def _parse_tile(self, data: dict[str, Any]) -> EditorState:
        try:
            kind = UiTileKind(data.get("kind", UiTileKind.CHART.value))
        except ValueError:
            raise TileDefinitionError(f"{self.path}: unknown tile kind '{data.get('kind')}'")

        state = EditorState(
            title=data.get("title", ""),
            description=data.get("description", ""),
            kind=kind,
            chart_type=data.get("chartType", DEFAULT_CHART_TYPE),
            connection_id=data.get("connectionId"),
            is_query_mode=bool(data.get("isQueryMode", False)),
            custom_query=data.get("customQuery", ""),
        )

        for field_id in data.get("dimensions") or []:
            state.selection.add_dimension(self._field(field_id))

        for entry in data.get("measures") or []:
            if isinstance(entry, str):
                entry = {"field": entry}
            field = self._field(entry["field"])
            if not state.selection.add_measure(field):
                self.rejected_measures.append(field.field_id)
                continue
            index = len(state.selection.measures) - 1
            if entry.get("aggregation"):
                state.selection.set_aggregation(index, entry["aggregation"])
            if entry.get("alias"):
                state.selection.set_alias(index, entry["alias"])

        if data.get("textRows"):
            state.text_rows = [
                TextRow.from_dict({"id": str(i + 1), **row})
                for i, row in enumerate(data["textRows"])
            ]
        return state
