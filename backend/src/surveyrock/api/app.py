"""FastAPI application."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from surveyrock.auth import JWTService, PasswordService, UserStore, authenticate_request
from surveyrock.auth.endpoints import create_auth_router
from surveyrock.connections import ConnectionStore
from surveyrock.connections.endpoints import create_connections_router
from surveyrock.dashboards import DashboardStore
from surveyrock.dashboards.endpoints import create_dashboards_router
from surveyrock.persistence import DatabaseConfig
from surveyrock.settings import Settings

logger = logging.getLogger(__name__)

# Global instances (initialized on startup)
engine: Engine | None = None
user_store: UserStore | None = None
connection_store: ConnectionStore | None = None
dashboard_store: DashboardStore | None = None
jwt_service: JWTService | None = None
password_service: PasswordService | None = None


def _base_path() -> Path:
    # Relative to cwd, which should be /backend
    cwd = Path.cwd()
    return cwd.parent if cwd.name == "backend" else cwd


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize on startup, cleanup on shutdown."""
    global engine, user_store, connection_store, dashboard_store
    global jwt_service, password_service

    settings = Settings.from_env()

    # Initialize database (supports DATABASE_URL or SURVEYROCK_DB_PATH env vars)
    db_config = DatabaseConfig.from_env(_base_path())

    # Ensure parent directory exists for SQLite databases
    sqlite_path = db_config.sqlite_path
    if sqlite_path:
        sqlite_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(db_config.sqlalchemy_url)
    user_store = UserStore(engine)
    connection_store = ConnectionStore(engine)
    dashboard_store = DashboardStore(engine)

    # Initialize auth services (can be disabled via environment variable for testing)
    if settings.disable_auth:
        logger.warning("Authentication is disabled (SURVEYROCK_DISABLE_AUTH)")
        jwt_service = None
        password_service = None
    else:
        jwt_service = JWTService(settings.secret_key)
        password_service = PasswordService()

    yield

    # Cleanup
    if engine:
        engine.dispose()
    engine = user_store = connection_store = dashboard_store = None
    jwt_service = password_service = None


app = FastAPI(title="SurveyRock API", lifespan=lifespan)

# CORS for frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=Settings.from_env().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Auth Middleware (uses global jwt_service) ---


@app.middleware("http")
async def auth_middleware(request: Request, call_next):
    """Extract JWT from Authorization header and set user context."""
    authenticate_request(request, jwt_service)
    return await call_next(request)


# --- Routers ---

app.include_router(
    create_auth_router(
        get_jwt_service=lambda: jwt_service,
        get_password_service=lambda: password_service,
        get_user_store=lambda: user_store,
    )
)
app.include_router(create_connections_router(get_connection_store=lambda: connection_store))
app.include_router(create_dashboards_router(get_dashboard_store=lambda: dashboard_store))


@app.get("/api/health")
async def health() -> dict[str, Any]:
    return {"status": "ok", "auth": jwt_service is not None}
