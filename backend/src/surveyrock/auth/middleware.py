"""Request authentication.

The middleware extracts the Bearer token from the Authorization header and
stores the caller on request.state. It never rejects a request; endpoints
decide via the dependencies in surveyrock.auth.dependencies.
"""

from starlette.requests import Request

from surveyrock.auth.jwt_service import JWTError, JWTService
from surveyrock.auth.types import TokenClaims, UserContext

# Paths that handle their own token validation
SKIP_AUTH_PATHS = (
    "/api/auth/login",
    "/api/auth/refresh",
    "/api/auth/register",
    "/docs",
    "/openapi.json",
    "/redoc",
)


def authenticate_request(request: Request, jwt_service: JWTService | None) -> None:
    """Populate request.state with the caller's identity.

    Sets:
        auth_enabled: False when the app runs without a JWT service
        token_claims: Decoded access token claims, or None
        user_context: UserContext for a valid access token, or None
    """
    request.state.auth_enabled = jwt_service is not None
    request.state.user_context = None
    request.state.token_claims = None

    if not jwt_service:
        return
    if any(request.url.path.startswith(p) for p in SKIP_AUTH_PATHS):
        return

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return

    token = auth_header[7:]  # Remove "Bearer " prefix
    try:
        claims = jwt_service.decode_token(token)
    except JWTError:
        return  # Invalid token - leave user_context as None

    # Refresh tokens are not accepted for API access
    if claims.type == "access":
        request.state.token_claims = claims
        request.state.user_context = UserContext(
            user_id=claims.user_id,
            roles=[claims.role] if claims.role else [],
        )


def get_user_context(request: Request) -> UserContext | None:
    return getattr(request.state, "user_context", None)


def get_token_claims(request: Request) -> TokenClaims | None:
    return getattr(request.state, "token_claims", None)
