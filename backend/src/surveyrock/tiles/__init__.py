"""Tile editing core: schema normalization, field selection and SQL synthesis."""

from surveyrock.tiles.types import (
    Aggregation,
    DatabaseField,
    DimensionField,
    MeasureField,
    PersistedTileKind,
    TextRow,
    TextRowType,
    TileConfiguration,
    UiTileKind,
)
from surveyrock.tiles.classifier import is_numeric
from surveyrock.tiles.schema import normalize_schema, unwrap_schema_response
from surveyrock.tiles.selection import SelectionSet
from surveyrock.tiles.sql import generate_sql
from surveyrock.tiles.builder import (
    EditorState,
    build_configuration,
    build_tile_payload,
    restore_editor_state,
    to_backend_kind,
)
from surveyrock.tiles.validation import ValidationError, validate_tile

__all__ = [
    "Aggregation",
    "DatabaseField",
    "DimensionField",
    "MeasureField",
    "PersistedTileKind",
    "TextRow",
    "TextRowType",
    "TileConfiguration",
    "UiTileKind",
    "is_numeric",
    "normalize_schema",
    "unwrap_schema_response",
    "SelectionSet",
    "generate_sql",
    "EditorState",
    "build_configuration",
    "build_tile_payload",
    "restore_editor_state",
    "to_backend_kind",
    "ValidationError",
    "validate_tile",
]
