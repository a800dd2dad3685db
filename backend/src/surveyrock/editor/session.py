"""Tile editor session: the state behind one open tile dialog.

A session owns the editor state of a single tile from open to save or
cancel. Mutations are plain synchronous methods; only connection loading,
schema loading and saving await the API.

Schema responses are tagged with a request token. Selecting a connection
bumps the token, so a slower response for a previously selected
connection is discarded instead of overwriting the newer field list.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from surveyrock.editor.client import ApiError, SurveyRockClient
from surveyrock.tiles.builder import (
    EditorState,
    build_tile_payload,
    new_text_row,
    restore_editor_state,
)
from surveyrock.tiles.classifier import is_numeric
from surveyrock.tiles.schema import (
    SchemaPayloadError,
    normalize_schema,
    unwrap_schema_response,
)
from surveyrock.tiles.types import DatabaseField, TextRowType, UiTileKind
from surveyrock.tiles.validation import validate_tile

logger = logging.getLogger(__name__)


class TileEditorSession:
    """Editor state and actions for creating or editing one tile."""

    def __init__(
        self,
        client: SurveyRockClient,
        dashboard_id: str,
        tile: dict[str, Any] | None = None,
    ):
        self.client = client
        self.dashboard_id = dashboard_id
        self.tile = tile
        self.state = restore_editor_state(tile) if tile else EditorState()
        self.connections: list[dict[str, Any]] = []
        self.fields: list[DatabaseField] = []
        self.error = ""
        self.loading = False
        self.saving = False
        self._schema_token = 0

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Load active connections and, when editing, the tile's schema."""
        self.loading = True
        try:
            connections = await self.client.list_connections()
            self.connections = [c for c in connections if c.get("status") == "active"]
        except (ApiError, httpx.HTTPError) as e:
            logger.error("Failed to load database connections: %s", e)
            self.error = "Failed to load database connections"
        finally:
            self.loading = False

        if self.state.connection_id:
            await self.load_schema()

    async def select_connection(self, connection_id: str | None) -> None:
        """Switch connections; clears the selection and reloads fields."""
        self.state.connection_id = connection_id or None
        self.state.selection.clear()
        await self.load_schema()

    async def load_schema(self) -> None:
        """Fetch and normalize the selected connection's schema."""
        self._schema_token += 1
        token = self._schema_token
        self.fields = []

        connection_id = self.state.connection_id
        if not connection_id:
            self.loading = False
            return

        self.loading = True
        self.error = ""

        async def fetch_columns(schema: str, table: str) -> list[dict[str, Any]]:
            return await self.client.fetch_table_columns(connection_id, schema, table)

        try:
            response = await self.client.fetch_schema(connection_id)
            fields = await normalize_schema(unwrap_schema_response(response), fetch_columns)
        except (ApiError, SchemaPayloadError, httpx.HTTPError) as e:
            if token == self._schema_token:
                logger.error("Error loading connection schema: %s", e)
                self.error = f"Failed to load database schema: {e}"
                self.fields = []
                self.loading = False
            return

        if token != self._schema_token:
            logger.debug("Discarding stale schema for connection %s", connection_id)
            return

        self.fields = fields
        self.state.selection.resolve_tables(fields)
        self.loading = False

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    @property
    def numeric_fields(self) -> list[DatabaseField]:
        return [f for f in self.fields if is_numeric(f)]

    def add_dimension(self, field: DatabaseField) -> bool:
        return self.state.selection.add_dimension(field)

    def remove_dimension(self, index: int) -> None:
        self.state.selection.remove_dimension(index)

    def add_measure(self, field: DatabaseField) -> bool:
        return self.state.selection.add_measure(field)

    def remove_measure(self, index: int) -> None:
        self.state.selection.remove_measure(index)

    def set_aggregation(self, index: int, aggregation: str) -> None:
        self.state.selection.set_aggregation(index, aggregation)

    def set_alias(self, index: int, alias: str | None) -> None:
        self.state.selection.set_alias(index, alias)

    # ------------------------------------------------------------------
    # Text rows
    # ------------------------------------------------------------------

    def add_text_row(self, row_type: str = TextRowType.TEXT.value) -> str:
        row = new_text_row(row_type)
        self.state.text_rows.append(row)
        return row.id

    def set_text_row_content(self, row_id: str, content: str) -> None:
        for row in self.state.text_rows:
            if row.id == row_id:
                row.content = content

    def toggle_text_row_query(self, row_id: str) -> None:
        for row in self.state.text_rows:
            if row.id == row_id:
                row.is_query = not row.is_query

    def set_text_row_type(self, row_id: str, row_type: str) -> None:
        for row in self.state.text_rows:
            if row.id == row_id:
                row.type = row_type

    def remove_text_row(self, row_id: str) -> None:
        self.state.text_rows = [r for r in self.state.text_rows if r.id != row_id]

    # ------------------------------------------------------------------
    # Kind, preview, save
    # ------------------------------------------------------------------

    def set_kind(self, kind: UiTileKind | str) -> None:
        self.state.kind = UiTileKind(kind)

    def preview_sql(self) -> str:
        if self.state.kind == UiTileKind.QUERY and self.state.is_query_mode:
            return self.state.custom_query
        return self.state.selection.to_sql()

    async def save(self) -> bool:
        """Validate and persist the tile.

        Returns:
            True if saved. On failure `error` holds the reason and the
            editor state is left untouched.
        """
        failure = validate_tile(self.state)
        if failure:
            self.error = failure.message
            return False

        self.error = ""
        self.saving = True
        payload = build_tile_payload(self.state, self.dashboard_id)
        try:
            if self.tile and self.tile.get("id"):
                self.tile = await self.client.update_tile(self.tile["id"], payload)
            else:
                self.tile = await self.client.create_tile(payload)
        except (ApiError, httpx.HTTPError) as e:
            logger.error("Error saving tile: %s", e)
            self.error = f"Failed to save tile: {e}"
            return False
        finally:
            self.saving = False

        return True
