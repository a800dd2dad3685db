"""Registered database connection types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy.engine import URL


class ConnectionType(str, Enum):
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class ConnectionStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"


# SQLAlchemy drivers per connection type
DRIVERS = {
    ConnectionType.SQLITE: "sqlite",
    ConnectionType.POSTGRESQL: "postgresql+psycopg",
}


@dataclass
class DatabaseConnection:
    """An external database a user registered as a tile data source."""

    id: str
    name: str
    type: ConnectionType
    database: str
    host: str | None = None
    port: int | None = None
    username: str | None = None
    password: str | None = None
    status: ConnectionStatus = ConnectionStatus.ACTIVE
    owner_id: str | None = None
    last_error: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def sqlalchemy_url(self) -> URL:
        """Build the SQLAlchemy URL. For SQLite, database is the file path."""
        if self.type == ConnectionType.SQLITE:
            return URL.create(DRIVERS[self.type], database=self.database)
        return URL.create(
            DRIVERS[self.type],
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to API response dict. The password is never returned."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "username": self.username,
            "hasPassword": bool(self.password),
            "status": self.status.value,
            "ownerId": self.owner_id,
            "lastError": self.last_error,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
