"""Database connection API endpoints."""

import logging
from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from surveyrock.auth.dependencies import owner_filter, require_authenticated, require_writer
from surveyrock.auth.types import UserContext
from surveyrock.connections.introspection import IntrospectionError, SchemaInspector
from surveyrock.connections.store import ConnectionStore
from surveyrock.connections.types import ConnectionStatus, ConnectionType, DatabaseConnection

logger = logging.getLogger(__name__)


class ConnectionCreateRequest(BaseModel):
    """Request body for registering a connection."""

    name: str
    type: ConnectionType
    database: str
    host: str | None = None
    port: int | None = None
    username: str | None = None
    password: str | None = None
    status: ConnectionStatus = ConnectionStatus.ACTIVE


class ConnectionUpdateRequest(BaseModel):
    """Request body for updating a connection. Omitted fields are kept."""

    name: str | None = None
    type: ConnectionType | None = None
    database: str | None = None
    host: str | None = None
    port: int | None = None
    username: str | None = None
    password: str | None = None
    status: ConnectionStatus | None = None


def create_connections_router(
    get_connection_store: Callable[[], ConnectionStore | None],
) -> APIRouter:
    """Create the connections router with injected dependencies."""
    router = APIRouter(prefix="/api/connections", tags=["connections"])

    def _store() -> ConnectionStore:
        store = get_connection_store()
        if not store:
            raise HTTPException(500, "Connection store not initialized")
        return store

    def _get_owned(connection_id: str, user_context: UserContext) -> DatabaseConnection:
        connection = _store().get(connection_id)
        owner = owner_filter(user_context)
        if not connection or (owner is not None and connection.owner_id != owner):
            raise HTTPException(404, "Connection not found")
        return connection

    @router.get("")
    async def list_connections(
        user_context: UserContext = Depends(require_authenticated),
    ) -> dict[str, Any]:
        """List the caller's connections, each with its status."""
        connections = _store().list(owner_id=owner_filter(user_context))
        return {"data": [c.to_dict() for c in connections]}

    @router.post("", status_code=201)
    async def create_connection(
        request: ConnectionCreateRequest,
        user_context: UserContext = Depends(require_writer),
    ) -> dict[str, Any]:
        connection = _store().create(
            DatabaseConnection(
                id="",
                name=request.name,
                type=request.type,
                database=request.database,
                host=request.host,
                port=request.port,
                username=request.username,
                password=request.password,
                status=request.status,
                owner_id=user_context.user_id,
            )
        )
        return {"data": connection.to_dict()}

    @router.get("/{connection_id}")
    async def get_connection(
        connection_id: str,
        user_context: UserContext = Depends(require_authenticated),
    ) -> dict[str, Any]:
        return {"data": _get_owned(connection_id, user_context).to_dict()}

    @router.put("/{connection_id}")
    async def update_connection(
        connection_id: str,
        request: ConnectionUpdateRequest,
        user_context: UserContext = Depends(require_writer),
    ) -> dict[str, Any]:
        _get_owned(connection_id, user_context)
        updates = request.model_dump(exclude_unset=True)
        # Required columns cannot be cleared
        for key in ("name", "type", "database", "status"):
            if key in updates and updates[key] is None:
                del updates[key]
        for key in ("type", "status"):
            if key in updates:
                updates[key] = updates[key].value
        updated = _store().update(connection_id, updates)
        if not updated:
            raise HTTPException(404, "Connection not found")
        return {"data": updated.to_dict()}

    @router.delete("/{connection_id}")
    async def delete_connection(
        connection_id: str,
        user_context: UserContext = Depends(require_writer),
    ) -> dict[str, Any]:
        _get_owned(connection_id, user_context)
        if not _store().delete(connection_id):
            raise HTTPException(404, "Connection not found")
        return {"success": True}

    @router.post("/{connection_id}/test")
    def test_connection(
        connection_id: str,
        user_context: UserContext = Depends(require_writer),
    ) -> dict[str, Any]:
        """Try the connection and record the outcome as its status."""
        connection = _get_owned(connection_id, user_context)
        with SchemaInspector(connection) as inspector:
            try:
                inspector.ping()
            except IntrospectionError as e:
                logger.warning("Connection test failed for %s: %s", connection_id, e)
                _store().set_status(connection_id, ConnectionStatus.ERROR, str(e))
                return {"success": False, "error": str(e)}

        _store().set_status(connection_id, ConnectionStatus.ACTIVE)
        return {"success": True}

    # Sync endpoints: introspection blocks on driver calls.

    @router.get("/{connection_id}/schema")
    def get_schema(
        connection_id: str,
        user_context: UserContext = Depends(require_authenticated),
    ) -> dict[str, Any]:
        """List schemas and their tables."""
        connection = _get_owned(connection_id, user_context)
        with SchemaInspector(connection) as inspector:
            try:
                listing = inspector.list_schemas()
            except IntrospectionError as e:
                raise HTTPException(502, f"Failed to read schema: {e}")
        return {"success": True, "data": listing}

    @router.get("/{connection_id}/schema/{schema}/{table}")
    def get_table_columns(
        connection_id: str,
        schema: str,
        table: str,
        user_context: UserContext = Depends(require_authenticated),
    ) -> dict[str, Any]:
        """List the columns of one table."""
        connection = _get_owned(connection_id, user_context)
        with SchemaInspector(connection) as inspector:
            try:
                columns = inspector.list_columns(schema, table)
            except IntrospectionError as e:
                raise HTTPException(404, str(e))
        return {"success": True, "data": columns}

    return router
