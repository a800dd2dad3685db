"""Dashboard and tile records."""

from dataclasses import dataclass, field
from typing import Any

from surveyrock.tiles.types import PersistedTileKind


@dataclass
class Dashboard:
    """A named collection of tiles owned by one user."""

    id: str
    name: str
    description: str | None = None
    owner_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "ownerId": self.owner_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Tile:
    """A persisted dashboard tile.

    config holds the tile configuration as built by the editor (camelCase
    keys, including uiType/uiChartType). position is stored as given.
    """

    id: str
    dashboard_id: str
    title: str
    type: PersistedTileKind
    config: dict[str, Any] = field(default_factory=dict)
    description: str | None = None
    connection_id: str | None = None
    position: dict[str, Any] | None = None
    owner_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the tileDto shape used by the API and the editor."""
        return {
            "id": self.id,
            "dashboardId": self.dashboard_id,
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "connectionId": self.connection_id,
            "config": self.config,
            "position": self.position,
            "ownerId": self.owner_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
