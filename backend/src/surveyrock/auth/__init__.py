"""Authentication module for SurveyRock."""

from surveyrock.auth.types import (
    TokenClaims,
    TokenPair,
    User,
    UserContext,
)
from surveyrock.auth.password import PasswordService
from surveyrock.auth.jwt_service import JWTService
from surveyrock.auth.store import UserStore
from surveyrock.auth.middleware import authenticate_request, get_user_context
from surveyrock.auth.dependencies import (
    ROLE_HIERARCHY,
    owner_filter,
    require_authenticated,
    require_writer,
)

__all__ = [
    "TokenClaims",
    "TokenPair",
    "User",
    "UserContext",
    "PasswordService",
    "JWTService",
    "UserStore",
    "authenticate_request",
    "get_user_context",
    "ROLE_HIERARCHY",
    "owner_filter",
    "require_authenticated",
    "require_writer",
]
