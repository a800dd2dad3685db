"""Completeness rules checked before a tile is saved.

The gate reports the first failing rule only, so the editor can show a
single reason and abort the save before any request is made.
"""

from dataclasses import dataclass
from typing import Any

from surveyrock.tiles.builder import EditorState
from surveyrock.tiles.types import TextRow, UiTileKind


@dataclass(frozen=True)
class ValidationError:
    """A tile validation failure.

    Attributes:
        message: Human-readable reason shown to the user
        code: Machine-readable code (e.g., "MEASURE_REQUIRED")
        field: Editor field the failure relates to, if any
    """

    message: str
    code: str
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "field": self.field,
            "severity": "error",
        }


TITLE_REQUIRED = ValidationError("Tile name is required", "TITLE_REQUIRED", "title")
CONNECTION_REQUIRED = ValidationError(
    "A database connection is required", "CONNECTION_REQUIRED", "connectionId"
)
DIMENSION_REQUIRED = ValidationError(
    "At least one dimension is required", "DIMENSION_REQUIRED", "dimensions"
)
MEASURE_REQUIRED = ValidationError(
    "At least one measure is required", "MEASURE_REQUIRED", "measures"
)
METRIC_MEASURE_REQUIRED = ValidationError(
    "At least one measure is required for a metric tile", "MEASURE_REQUIRED", "measures"
)
TEXT_REQUIRED = ValidationError(
    "At least one row with content is required", "TEXT_REQUIRED", "textRows"
)
QUERY_ROW_CONNECTION_REQUIRED = ValidationError(
    "Query rows require a database connection", "CONNECTION_REQUIRED", "connectionId"
)
QUERY_REQUIRED = ValidationError("A SQL query is required", "QUERY_REQUIRED", "customQuery")


def _check_text_rows(rows: list[TextRow], connection_id: str | None) -> ValidationError | None:
    if not any(row.content.strip() for row in rows):
        return TEXT_REQUIRED
    if not connection_id and any(row.is_query for row in rows):
        return QUERY_ROW_CONNECTION_REQUIRED
    return None


def validate_tile(state: EditorState) -> ValidationError | None:
    """Return the first rule the state breaks, or None if it can be saved."""
    if not state.title.strip():
        return TITLE_REQUIRED

    kind = state.kind
    selection = state.selection

    if kind in (UiTileKind.CHART, UiTileKind.TABLE):
        if not state.connection_id:
            return CONNECTION_REQUIRED
        if not selection.dimensions:
            return DIMENSION_REQUIRED
        if not selection.measures:
            return MEASURE_REQUIRED
        return None

    if kind == UiTileKind.METRIC:
        if not state.connection_id:
            return CONNECTION_REQUIRED
        if not selection.measures:
            return METRIC_MEASURE_REQUIRED
        return None

    if kind == UiTileKind.QUERY and state.is_query_mode:
        if not state.connection_id:
            return CONNECTION_REQUIRED
        if not state.custom_query.strip():
            return QUERY_REQUIRED
        return None

    return _check_text_rows(state.text_rows, state.connection_id)


def is_valid(state: EditorState) -> bool:
    return validate_tile(state) is None
