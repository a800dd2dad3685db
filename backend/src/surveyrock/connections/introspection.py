"""Schema introspection of registered connections via SQLAlchemy reflection.

The listing is two-level (schemas, then table names per schema); columns
are fetched per table so large databases are not reflected in one go.
"""

import logging
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from surveyrock.connections.types import DatabaseConnection

logger = logging.getLogger(__name__)

# Schemas never offered as tile sources, per dialect
SYSTEM_SCHEMAS = {
    "postgresql": {"information_schema", "pg_catalog", "pg_toast"},
    "sqlite": set(),
}


class IntrospectionError(Exception):
    """Raised when a connection's schema cannot be read."""

    pass


class SchemaInspector:
    """Reads schema and column metadata from one connection."""

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = sa.create_engine(self.connection.sqlalchemy_url())
        return self._engine

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> "SchemaInspector":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def ping(self) -> None:
        """Open a connection and run a trivial query.

        Raises:
            IntrospectionError: If the database is unreachable
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(sa.text("SELECT 1"))
        except SQLAlchemyError as e:
            raise IntrospectionError(str(e)) from e

    def list_schemas(self) -> dict[str, Any]:
        """Return {"schemas": [...], "tables": {schema: [table, ...]}}."""
        try:
            inspector = sa.inspect(self.engine)
            excluded = SYSTEM_SCHEMAS.get(self.engine.dialect.name, set())
            schemas = [s for s in inspector.get_schema_names() if s.lower() not in excluded]
            tables = {schema: sorted(inspector.get_table_names(schema=schema)) for schema in schemas}
        except SQLAlchemyError as e:
            logger.warning("Schema listing failed for connection %s: %s", self.connection.id, e)
            raise IntrospectionError(str(e)) from e
        return {"schemas": schemas, "tables": tables}

    def list_columns(self, schema: str, table: str) -> list[dict[str, Any]]:
        """Return column records for one table.

        Raises:
            IntrospectionError: If the table does not exist or cannot be read
        """
        try:
            inspector = sa.inspect(self.engine)
            if not inspector.has_table(table, schema=schema):
                raise IntrospectionError(f"Table not found: {schema}.{table}")
            columns = inspector.get_columns(table, schema=schema)
        except SQLAlchemyError as e:
            raise IntrospectionError(str(e)) from e

        return [
            {
                "name": column["name"],
                "type": str(column["type"]),
                "nullable": bool(column.get("nullable", True)),
                "description": column.get("comment") or "",
            }
            for column in columns
        ]
