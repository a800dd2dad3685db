"""Persistence for registered database connections."""

from typing import Any

from surveyrock.connections.types import ConnectionStatus, ConnectionType, DatabaseConnection
from surveyrock.persistence.store import SqlStore, new_id, utc_now


class ConnectionStore(SqlStore):
    """Manages the database_connections table."""

    DDL = (
        """
        CREATE TABLE IF NOT EXISTS database_connections (
            id              TEXT PRIMARY KEY,
            name            TEXT NOT NULL,
            type            TEXT NOT NULL,
            host            TEXT,
            port            INTEGER,
            database_name   TEXT NOT NULL,
            username        TEXT,
            password        TEXT,
            status          TEXT NOT NULL DEFAULT 'active',
            owner_id        TEXT,
            last_error      TEXT,
            created_at      TEXT,
            updated_at      TEXT
        )
        """,
        """
        CREATE INDEX IF NOT EXISTS idx_connections_owner
        ON database_connections(owner_id)
        """,
    )

    UPDATABLE = {"name", "type", "host", "port", "database_name", "username", "password", "status"}

    def _row_to_connection(self, row: Any) -> DatabaseConnection:
        return DatabaseConnection(
            id=row["id"],
            name=row["name"],
            type=ConnectionType(row["type"]),
            host=row["host"],
            port=row["port"],
            database=row["database_name"],
            username=row["username"],
            password=row["password"],
            status=ConnectionStatus(row["status"]),
            owner_id=row["owner_id"],
            last_error=row["last_error"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def create(self, connection: DatabaseConnection) -> DatabaseConnection:
        """Insert a connection. Generates ID and timestamps if not set."""
        now = utc_now()
        connection_id = connection.id or new_id()
        self._execute(
            """
            INSERT INTO database_connections
                (id, name, type, host, port, database_name, username, password,
                 status, owner_id, last_error, created_at, updated_at)
            VALUES
                (:id, :name, :type, :host, :port, :database_name, :username, :password,
                 :status, :owner_id, :last_error, :created_at, :updated_at)
            """,
            {
                "id": connection_id,
                "name": connection.name,
                "type": connection.type.value,
                "host": connection.host,
                "port": connection.port,
                "database_name": connection.database,
                "username": connection.username,
                "password": connection.password,
                "status": connection.status.value,
                "owner_id": connection.owner_id,
                "last_error": connection.last_error,
                "created_at": now,
                "updated_at": now,
            },
        )
        return self.get(connection_id)  # type: ignore[return-value]

    def get(self, connection_id: str) -> DatabaseConnection | None:
        row = self._fetch_one(
            "SELECT * FROM database_connections WHERE id = :id", {"id": connection_id}
        )
        return self._row_to_connection(row) if row else None

    def list(self, owner_id: str | None = None, status: str | None = None) -> list[DatabaseConnection]:
        """List connections, optionally scoped to an owner and/or status."""
        conditions: list[str] = []
        params: dict[str, Any] = {}
        if owner_id is not None:
            conditions.append("owner_id = :owner_id")
            params["owner_id"] = owner_id
        if status is not None:
            conditions.append("status = :status")
            params["status"] = status

        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = self._fetch_all(f"SELECT * FROM database_connections{where} ORDER BY name", params)
        return [self._row_to_connection(row) for row in rows]

    def update(self, connection_id: str, updates: dict[str, Any]) -> DatabaseConnection | None:
        """Partial update. Keys use column names (database -> database_name)."""
        if not self.get(connection_id):
            return None
        if "database" in updates:
            updates = {**updates, "database_name": updates["database"]}
        self._update_columns("database_connections", connection_id, updates, self.UPDATABLE)
        return self.get(connection_id)

    def set_status(
        self, connection_id: str, status: ConnectionStatus, error: str | None = None
    ) -> None:
        self._execute(
            """
            UPDATE database_connections
            SET status = :status, last_error = :last_error, updated_at = :updated_at
            WHERE id = :id
            """,
            {
                "status": status.value,
                "last_error": error,
                "updated_at": utc_now(),
                "id": connection_id,
            },
        )

    def delete(self, connection_id: str) -> bool:
        return self._execute(
            "DELETE FROM database_connections WHERE id = :id", {"id": connection_id}
        ) > 0
