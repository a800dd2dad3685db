"""Registered database connections: storage, introspection and API."""

from surveyrock.connections.types import ConnectionStatus, ConnectionType, DatabaseConnection
from surveyrock.connections.store import ConnectionStore
from surveyrock.connections.introspection import IntrospectionError, SchemaInspector

__all__ = [
    "ConnectionStatus",
    "ConnectionType",
    "DatabaseConnection",
    "ConnectionStore",
    "IntrospectionError",
    "SchemaInspector",
]
