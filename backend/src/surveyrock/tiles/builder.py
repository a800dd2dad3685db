"""Tile configuration builder.

Turns the editor state of one tile into the persisted configuration and
tile payload, and back again when an existing tile is opened for editing.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any

from surveyrock.tiles.selection import SelectionSet
from surveyrock.tiles.types import (
    BACKEND_CHART_TYPES,
    BACKEND_TO_UI_KIND,
    DEFAULT_CHART_TYPE,
    UI_CHART_TYPES,
    UI_TO_BACKEND_KIND,
    DimensionField,
    MeasureField,
    PersistedTileKind,
    TextRow,
    TextRowType,
    TileConfiguration,
    UiTileKind,
)


def new_text_row(row_type: str = TextRowType.TEXT.value) -> TextRow:
    return TextRow(id=uuid.uuid4().hex, type=row_type)


@dataclass
class EditorState:
    """Everything the editor holds for one tile until it is saved."""

    title: str = ""
    description: str = ""
    kind: UiTileKind = UiTileKind.CHART
    chart_type: str = DEFAULT_CHART_TYPE
    connection_id: str | None = None
    selection: SelectionSet = field(default_factory=SelectionSet)
    text_rows: list[TextRow] = field(
        default_factory=lambda: [TextRow(id="1", type=TextRowType.HEADER.value)]
    )
    is_query_mode: bool = False
    custom_query: str = ""
    position: dict[str, Any] | None = None


def to_backend_kind(kind: UiTileKind) -> PersistedTileKind:
    return UI_TO_BACKEND_KIND[kind]


def build_configuration(state: EditorState) -> TileConfiguration:
    """Build the config payload for the state's tile kind."""
    selection = state.selection
    kind = state.kind

    if kind == UiTileKind.CHART:
        chart_type = state.chart_type
        if chart_type not in BACKEND_CHART_TYPES:
            chart_type = DEFAULT_CHART_TYPE
        config = TileConfiguration(
            ui_type=kind,
            chart_type=chart_type,
            ui_chart_type=state.chart_type,
            dimensions=list(selection.dimensions),
            measures=list(selection.measures),
            sql_query=selection.to_sql(),
        )
    elif kind == UiTileKind.TABLE:
        config = TileConfiguration(
            ui_type=kind,
            chart_type=DEFAULT_CHART_TYPE,
            ui_chart_type="table",
            dimensions=list(selection.dimensions),
            measures=list(selection.measures),
            sql_query=selection.to_sql(),
        )
    elif kind == UiTileKind.METRIC:
        # Only the first measure is used; extras are tolerated
        config = TileConfiguration(
            ui_type=kind,
            measure=selection.measures[0] if selection.measures else None,
            sql_query=selection.to_sql(),
        )
    elif kind == UiTileKind.QUERY and state.is_query_mode:
        config = TileConfiguration(
            ui_type=kind,
            custom_query=state.custom_query,
            is_query_mode=True,
            sql_query=state.custom_query,
        )
    else:
        config = TileConfiguration(
            ui_type=kind,
            text_rows=list(state.text_rows),
            is_query_mode=False,
        )

    if state.connection_id:
        config.connection_id = state.connection_id
    return config


def build_tile_payload(state: EditorState, dashboard_id: str) -> dict[str, Any]:
    """Build the create/update body the tile API accepts."""
    config = build_configuration(state)
    payload: dict[str, Any] = {
        "title": state.title,
        "type": config.backend_kind.value,
        "dashboardId": dashboard_id,
        "config": config.to_dict(),
    }
    if state.description:
        payload["description"] = state.description
    if state.connection_id:
        payload["connectionId"] = state.connection_id
    if state.position is not None:
        payload["position"] = state.position
    return payload


def resolve_ui_kind(backend_type: str | None, config: dict[str, Any]) -> UiTileKind:
    """Recover the UI kind, preferring the UI tags over the backend type."""
    ui_type = config.get("uiType")
    if ui_type in {k.value for k in UiTileKind}:
        return UiTileKind(ui_type)
    if config.get("uiChartType") == "table":
        return UiTileKind.TABLE
    if backend_type in {k.value for k in PersistedTileKind}:
        return BACKEND_TO_UI_KIND[PersistedTileKind(backend_type)]
    return UiTileKind.CHART


def resolve_chart_type(kind: UiTileKind, config: dict[str, Any]) -> str:
    ui_chart_type = config.get("uiChartType")
    if ui_chart_type in UI_CHART_TYPES:
        return ui_chart_type
    if kind == UiTileKind.TABLE:
        return "table"
    chart_type = config.get("chartType")
    if chart_type in UI_CHART_TYPES:
        return chart_type
    return DEFAULT_CHART_TYPE


def restore_editor_state(tile: dict[str, Any]) -> EditorState:
    """Rebuild editor state from a stored tile (API camelCase shape)."""
    config: dict[str, Any] = tile.get("config") or {}
    kind = resolve_ui_kind(tile.get("type"), config)

    dimensions = [DimensionField.from_dict(d) for d in config.get("dimensions") or []]
    measures = [MeasureField.from_dict(m) for m in config.get("measures") or []]
    if not measures and config.get("measure"):
        measures = [MeasureField.from_dict(config["measure"])]

    state = EditorState(
        title=tile.get("title") or "",
        description=tile.get("description") or "",
        kind=kind,
        chart_type=resolve_chart_type(kind, config),
        connection_id=tile.get("connectionId") or config.get("connectionId"),
        selection=SelectionSet(dimensions, measures),
        is_query_mode=bool(config.get("isQueryMode", False)),
        custom_query=config.get("customQuery") or "",
        position=tile.get("position"),
    )
    if config.get("textRows"):
        state.text_rows = [TextRow.from_dict(r) for r in config["textRows"]]
    return state
