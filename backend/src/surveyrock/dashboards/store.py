"""Persistence for dashboards and their tiles."""

from typing import Any

from surveyrock.dashboards.types import Dashboard, Tile
from surveyrock.persistence.store import SqlStore, dump_json, load_json, new_id, utc_now
from surveyrock.tiles.types import PersistedTileKind


class DashboardStore(SqlStore):
    """Manages the dashboards and tiles tables.

    Tiles belong to exactly one dashboard and are removed with it.
    """

    DDL = (
        """
        CREATE TABLE IF NOT EXISTS dashboards (
            id              TEXT PRIMARY KEY,
            name            TEXT NOT NULL,
            description     TEXT,
            owner_id        TEXT,
            created_at      TEXT,
            updated_at      TEXT
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS tiles (
            id              TEXT PRIMARY KEY,
            dashboard_id    TEXT NOT NULL,
            title           TEXT NOT NULL,
            description     TEXT,
            type            TEXT NOT NULL,
            connection_id   TEXT,
            config_json     TEXT NOT NULL,
            position_json   TEXT,
            owner_id        TEXT,
            created_at      TEXT,
            updated_at      TEXT
        )
        """,
        """
        CREATE INDEX IF NOT EXISTS idx_tiles_dashboard
        ON tiles(dashboard_id)
        """,
        """
        CREATE INDEX IF NOT EXISTS idx_dashboards_owner
        ON dashboards(owner_id)
        """,
    )

    DASHBOARD_UPDATABLE = {"name", "description"}

    # -- Dashboards --

    def _row_to_dashboard(self, row: Any) -> Dashboard:
        return Dashboard(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            owner_id=row["owner_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def create_dashboard(
        self, name: str, description: str | None = None, owner_id: str | None = None
    ) -> Dashboard:
        now = utc_now()
        dashboard_id = new_id()
        self._execute(
            """
            INSERT INTO dashboards (id, name, description, owner_id, created_at, updated_at)
            VALUES (:id, :name, :description, :owner_id, :created_at, :updated_at)
            """,
            {
                "id": dashboard_id,
                "name": name,
                "description": description,
                "owner_id": owner_id,
                "created_at": now,
                "updated_at": now,
            },
        )
        return self.get_dashboard(dashboard_id)  # type: ignore[return-value]

    def get_dashboard(self, dashboard_id: str) -> Dashboard | None:
        row = self._fetch_one("SELECT * FROM dashboards WHERE id = :id", {"id": dashboard_id})
        return self._row_to_dashboard(row) if row else None

    def list_dashboards(self, owner_id: str | None = None) -> list[Dashboard]:
        if owner_id is None:
            rows = self._fetch_all("SELECT * FROM dashboards ORDER BY created_at")
        else:
            rows = self._fetch_all(
                "SELECT * FROM dashboards WHERE owner_id = :owner_id ORDER BY created_at",
                {"owner_id": owner_id},
            )
        return [self._row_to_dashboard(row) for row in rows]

    def update_dashboard(self, dashboard_id: str, updates: dict[str, Any]) -> Dashboard | None:
        if not self.get_dashboard(dashboard_id):
            return None
        self._update_columns("dashboards", dashboard_id, updates, self.DASHBOARD_UPDATABLE)
        return self.get_dashboard(dashboard_id)

    def delete_dashboard(self, dashboard_id: str) -> bool:
        """Delete a dashboard and all of its tiles."""
        self._execute("DELETE FROM tiles WHERE dashboard_id = :id", {"id": dashboard_id})
        return self._execute("DELETE FROM dashboards WHERE id = :id", {"id": dashboard_id}) > 0

    # -- Tiles --

    def _row_to_tile(self, row: Any) -> Tile:
        return Tile(
            id=row["id"],
            dashboard_id=row["dashboard_id"],
            title=row["title"],
            description=row["description"],
            type=PersistedTileKind(row["type"]),
            connection_id=row["connection_id"],
            config=load_json(row["config_json"]) or {},
            position=load_json(row["position_json"]),
            owner_id=row["owner_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def create_tile(self, tile: Tile) -> Tile:
        """Insert a tile. Generates ID and timestamps."""
        now = utc_now()
        tile_id = tile.id or new_id()
        self._execute(
            """
            INSERT INTO tiles
                (id, dashboard_id, title, description, type, connection_id,
                 config_json, position_json, owner_id, created_at, updated_at)
            VALUES
                (:id, :dashboard_id, :title, :description, :type, :connection_id,
                 :config_json, :position_json, :owner_id, :created_at, :updated_at)
            """,
            {
                "id": tile_id,
                "dashboard_id": tile.dashboard_id,
                "title": tile.title,
                "description": tile.description,
                "type": tile.type.value,
                "connection_id": tile.connection_id,
                "config_json": dump_json(tile.config or {}),
                "position_json": dump_json(tile.position),
                "owner_id": tile.owner_id,
                "created_at": now,
                "updated_at": now,
            },
        )
        return self.get_tile(tile_id)  # type: ignore[return-value]

    def get_tile(self, tile_id: str) -> Tile | None:
        row = self._fetch_one("SELECT * FROM tiles WHERE id = :id", {"id": tile_id})
        return self._row_to_tile(row) if row else None

    def list_tiles(self, dashboard_id: str) -> list[Tile]:
        rows = self._fetch_all(
            "SELECT * FROM tiles WHERE dashboard_id = :dashboard_id ORDER BY created_at",
            {"dashboard_id": dashboard_id},
        )
        return [self._row_to_tile(row) for row in rows]

    def replace_tile(self, tile: Tile) -> Tile | None:
        """Overwrite a tile's content. The owner and creation time are kept."""
        updated = self._update_columns(
            "tiles",
            tile.id,
            {
                "dashboard_id": tile.dashboard_id,
                "title": tile.title,
                "description": tile.description,
                "type": tile.type.value,
                "connection_id": tile.connection_id,
                "config_json": dump_json(tile.config or {}),
                "position_json": dump_json(tile.position),
            },
            {
                "dashboard_id",
                "title",
                "description",
                "type",
                "connection_id",
                "config_json",
                "position_json",
            },
        )
        return self.get_tile(tile.id) if updated else None

    def delete_tile(self, tile_id: str) -> bool:
        return self._execute("DELETE FROM tiles WHERE id = :id", {"id": tile_id}) > 0
