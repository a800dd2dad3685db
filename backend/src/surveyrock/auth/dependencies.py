"""FastAPI dependencies for authentication."""

from fastapi import HTTPException, Request

from surveyrock.auth.middleware import get_user_context
from surveyrock.auth.types import UserContext

# Role hierarchy - higher number = more permissions
ROLE_HIERARCHY = {
    "readonly": 1,
    "user": 2,
    "admin": 3,
}


def require_authenticated(request: Request) -> UserContext:
    """Dependency that requires an authenticated caller.

    When the app runs with auth disabled, an anonymous context is returned
    instead so every endpoint stays usable.

    Raises:
        HTTPException 401 if not authenticated
    """
    if not getattr(request.state, "auth_enabled", True):
        return UserContext()

    user_context = get_user_context(request)
    if not user_context:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_context


def require_writer(request: Request) -> UserContext:
    """Dependency that rejects read-only users for write endpoints.

    Raises:
        HTTPException 401 if not authenticated
        HTTPException 403 if the user's role is below "user"
    """
    user_context = require_authenticated(request)
    if user_context.user_id is None:
        return user_context

    level = max((ROLE_HIERARCHY.get(r, 0) for r in user_context.roles), default=0)
    if level < ROLE_HIERARCHY["user"]:
        raise HTTPException(status_code=403, detail="Read-only users cannot modify data")
    return user_context


def owner_filter(user_context: UserContext) -> str | None:
    """Owner id to scope queries by; None means unrestricted (admin or auth off)."""
    if user_context.user_id is None or user_context.is_admin:
        return None
    return user_context.user_id
