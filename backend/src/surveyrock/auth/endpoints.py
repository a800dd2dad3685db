"""Authentication API endpoints."""

from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from surveyrock.auth.dependencies import require_authenticated
from surveyrock.auth.jwt_service import InvalidTokenError, JWTService, TokenExpiredError
from surveyrock.auth.password import PasswordService
from surveyrock.auth.store import DuplicateEmailError, UserStore
from surveyrock.auth.types import UserContext


class LoginRequest(BaseModel):
    """Request body for login."""

    email: str
    password: str


class RefreshRequest(BaseModel):
    """Request body for token refresh."""

    refresh_token: str


class RegisterRequest(BaseModel):
    """Request body for user registration."""

    email: str
    password: str
    name: str


class LoginResponse(BaseModel):
    """Response body for login and refresh."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int


def create_auth_router(
    get_jwt_service: Callable[[], JWTService | None],
    get_password_service: Callable[[], PasswordService | None],
    get_user_store: Callable[[], UserStore | None],
) -> APIRouter:
    """Create the auth router with injected dependencies."""
    router = APIRouter(prefix="/api/auth", tags=["auth"])

    def _services() -> tuple[JWTService, PasswordService, UserStore]:
        jwt_service = get_jwt_service()
        password_service = get_password_service()
        users = get_user_store()
        if not users:
            raise HTTPException(500, "Service not initialized")
        if not jwt_service or not password_service:
            raise HTTPException(503, "Authentication is disabled")
        return jwt_service, password_service, users

    @router.post("/register", status_code=201)
    async def register(request: RegisterRequest) -> dict[str, Any]:
        """Register a user. The first user becomes an admin."""
        _, password_service, users = _services()

        weakness = password_service.check_strength(request.password)
        if weakness:
            raise HTTPException(400, weakness)

        role = "admin" if users.count() == 0 else "user"
        try:
            user = users.create(
                email=request.email,
                name=request.name,
                password_hash=password_service.hash(request.password),
                role=role,
            )
        except DuplicateEmailError as e:
            raise HTTPException(409, str(e))

        return {"data": user.to_dict()}

    @router.post("/login", response_model=LoginResponse)
    async def login(request: LoginRequest) -> LoginResponse:
        """Authenticate user and return tokens.

        Raises:
            HTTPException 401 if credentials invalid
            HTTPException 403 if user inactive
        """
        jwt_service, password_service, users = _services()

        user = users.get_by_email(request.email)
        if not user or not password_service.verify(request.password, user.password_hash):
            raise HTTPException(401, "Invalid email or password")
        if not user.active:
            raise HTTPException(403, "User account is disabled")
        if password_service.needs_rehash(user.password_hash):
            users.set_password_hash(user.id, password_service.hash(request.password))

        tokens = jwt_service.generate_token_pair(user.id, role=user.role)
        return LoginResponse(**tokens.to_dict())

    @router.post("/refresh", response_model=LoginResponse)
    async def refresh(request: RefreshRequest) -> LoginResponse:
        """Exchange a refresh token for a new token pair."""
        jwt_service, _, users = _services()

        try:
            user_id = jwt_service.validate_refresh_token(request.refresh_token)
        except TokenExpiredError:
            raise HTTPException(401, "Refresh token has expired")
        except InvalidTokenError as e:
            raise HTTPException(401, str(e))

        user = users.get(user_id)
        if not user or not user.active:
            raise HTTPException(401, "User not found or disabled")

        tokens = jwt_service.generate_token_pair(user.id, role=user.role)
        return LoginResponse(**tokens.to_dict())

    @router.get("/me")
    async def me(user_context: UserContext = Depends(require_authenticated)) -> dict[str, Any]:
        """Return the authenticated user's profile."""
        _, _, users = _services()

        user = users.get(user_context.user_id) if user_context.user_id else None
        if not user:
            raise HTTPException(404, "User not found")
        return {"data": user.to_dict()}

    return router
