"""Dashboard and tile API endpoints.

Tile writes pass the same validation gate the editor runs before saving;
a failing tile is answered with 422 and nothing is stored.
"""

import logging
from typing import Any, Callable, Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from surveyrock.auth.dependencies import owner_filter, require_authenticated, require_writer
from surveyrock.auth.types import UserContext
from surveyrock.dashboards.store import DashboardStore
from surveyrock.dashboards.types import Dashboard, Tile
from surveyrock.tiles.builder import restore_editor_state
from surveyrock.tiles.sql import generate_sql
from surveyrock.tiles.types import DimensionField, MeasureField, PersistedTileKind
from surveyrock.tiles.validation import ValidationError, validate_tile

logger = logging.getLogger(__name__)

INVALID_CONFIG = ValidationError(
    "Tile configuration is malformed", "INVALID_CONFIG", "config"
)


class DashboardRequest(BaseModel):
    """Request body for creating or updating a dashboard."""

    name: str
    description: str | None = None


class TileRequest(BaseModel):
    """Request body for creating or updating a tile (the editor's tileDto)."""

    title: str
    type: Literal["chart", "text", "kpi"]
    dashboardId: str
    config: dict[str, Any] = {}
    description: str | None = None
    connectionId: str | None = None
    position: dict[str, Any] | None = None


class SelectedFieldRequest(BaseModel):
    """A dimension or measure entry of a SQL preview request."""

    fieldId: str
    fieldName: str | None = None
    aggregation: str | None = None
    alias: str | None = None
    table: str | None = None


class PreviewSqlRequest(BaseModel):
    """Request body for SQL preview."""

    dimensions: list[SelectedFieldRequest] = []
    measures: list[SelectedFieldRequest] = []
    fieldTableMap: dict[str, str] = {}


def _validation_response(errors: list[dict[str, Any]]) -> JSONResponse:
    return JSONResponse(status_code=422, content={"valid": False, "errors": errors})


def create_dashboards_router(
    get_dashboard_store: Callable[[], DashboardStore | None],
) -> APIRouter:
    """Create the dashboards and tiles router with injected dependencies."""
    router = APIRouter(prefix="/api", tags=["dashboards"])

    def _store() -> DashboardStore:
        store = get_dashboard_store()
        if not store:
            raise HTTPException(500, "Dashboard store not initialized")
        return store

    def _get_dashboard(dashboard_id: str, user_context: UserContext) -> Dashboard:
        dashboard = _store().get_dashboard(dashboard_id)
        owner = owner_filter(user_context)
        if not dashboard or (owner is not None and dashboard.owner_id != owner):
            raise HTTPException(404, "Dashboard not found")
        return dashboard

    def _get_tile(tile_id: str, user_context: UserContext) -> Tile:
        tile = _store().get_tile(tile_id)
        owner = owner_filter(user_context)
        if not tile or (owner is not None and tile.owner_id != owner):
            raise HTTPException(404, "Tile not found")
        return tile

    def _tile_from_request(
        request: TileRequest, tile_id: str, owner_id: str | None
    ) -> Tile:
        return Tile(
            id=tile_id,
            dashboard_id=request.dashboardId,
            title=request.title,
            description=request.description,
            type=PersistedTileKind(request.type),
            connection_id=request.connectionId,
            config=request.config,
            position=request.position,
            owner_id=owner_id,
        )

    def _gate(request: TileRequest) -> JSONResponse | None:
        try:
            state = restore_editor_state(request.model_dump())
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.info("Rejected tile %r: malformed config (%s)", request.title, e)
            return _validation_response([INVALID_CONFIG.to_dict()])

        error = validate_tile(state)
        if error:
            logger.info("Rejected tile %r: %s", request.title, error.message)
            return _validation_response([error.to_dict()])
        return None

    # -- Dashboards --

    @router.get("/dashboards")
    async def list_dashboards(
        user_context: UserContext = Depends(require_authenticated),
    ) -> dict[str, Any]:
        dashboards = _store().list_dashboards(owner_id=owner_filter(user_context))
        return {"data": [d.to_dict() for d in dashboards]}

    @router.post("/dashboards", status_code=201)
    async def create_dashboard(
        request: DashboardRequest,
        user_context: UserContext = Depends(require_writer),
    ) -> dict[str, Any]:
        dashboard = _store().create_dashboard(
            request.name, request.description, owner_id=user_context.user_id
        )
        return {"data": dashboard.to_dict()}

    @router.get("/dashboards/{dashboard_id}")
    async def get_dashboard(
        dashboard_id: str,
        user_context: UserContext = Depends(require_authenticated),
    ) -> dict[str, Any]:
        return {"data": _get_dashboard(dashboard_id, user_context).to_dict()}

    @router.put("/dashboards/{dashboard_id}")
    async def update_dashboard(
        dashboard_id: str,
        request: DashboardRequest,
        user_context: UserContext = Depends(require_writer),
    ) -> dict[str, Any]:
        _get_dashboard(dashboard_id, user_context)
        updated = _store().update_dashboard(dashboard_id, request.model_dump())
        if not updated:
            raise HTTPException(404, "Dashboard not found")
        return {"data": updated.to_dict()}

    @router.delete("/dashboards/{dashboard_id}")
    async def delete_dashboard(
        dashboard_id: str,
        user_context: UserContext = Depends(require_writer),
    ) -> dict[str, Any]:
        """Delete a dashboard together with its tiles."""
        _get_dashboard(dashboard_id, user_context)
        _store().delete_dashboard(dashboard_id)
        return {"success": True}

    @router.get("/dashboards/{dashboard_id}/tiles")
    async def list_dashboard_tiles(
        dashboard_id: str,
        user_context: UserContext = Depends(require_authenticated),
    ) -> dict[str, Any]:
        _get_dashboard(dashboard_id, user_context)
        return {"data": [t.to_dict() for t in _store().list_tiles(dashboard_id)]}

    # -- Tiles --

    @router.post("/tiles/preview-sql")
    async def preview_sql(
        request: PreviewSqlRequest,
        user_context: UserContext = Depends(require_authenticated),
    ) -> dict[str, Any]:
        """Synthesize the SQL for a field selection without storing anything."""
        dimensions = [DimensionField.from_dict(d.model_dump()) for d in request.dimensions]
        measures = [MeasureField.from_dict(m.model_dump()) for m in request.measures]
        return {"sql": generate_sql(dimensions, measures, request.fieldTableMap)}

    @router.post("/tiles", status_code=201)
    async def create_tile(
        request: TileRequest,
        user_context: UserContext = Depends(require_writer),
    ):
        _get_dashboard(request.dashboardId, user_context)
        rejected = _gate(request)
        if rejected:
            return rejected

        tile = _store().create_tile(_tile_from_request(request, "", user_context.user_id))
        logger.info("Created %s tile %s on dashboard %s", tile.type.value, tile.id, tile.dashboard_id)
        return {"data": tile.to_dict()}

    @router.get("/tiles/{tile_id}")
    async def get_tile(
        tile_id: str,
        user_context: UserContext = Depends(require_authenticated),
    ) -> dict[str, Any]:
        return {"data": _get_tile(tile_id, user_context).to_dict()}

    @router.put("/tiles/{tile_id}")
    async def update_tile(
        tile_id: str,
        request: TileRequest,
        user_context: UserContext = Depends(require_writer),
    ):
        existing = _get_tile(tile_id, user_context)
        if request.dashboardId != existing.dashboard_id:
            _get_dashboard(request.dashboardId, user_context)
        rejected = _gate(request)
        if rejected:
            return rejected

        updated = _store().replace_tile(_tile_from_request(request, tile_id, existing.owner_id))
        if not updated:
            raise HTTPException(404, "Tile not found")
        return {"data": updated.to_dict()}

    @router.delete("/tiles/{tile_id}")
    async def delete_tile(
        tile_id: str,
        user_context: UserContext = Depends(require_writer),
    ) -> dict[str, Any]:
        _get_tile(tile_id, user_context)
        _store().delete_tile(tile_id)
        return {"success": True}

    return router
