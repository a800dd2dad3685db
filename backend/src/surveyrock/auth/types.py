"""Type definitions for authentication."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class TokenClaims:
    """Claims embedded in a JWT token.

    Attributes:
        user_id: The authenticated user's ID
        role: The user's role
        exp: Token expiration timestamp
        iat: Token issued-at timestamp
        type: Token type ("access" or "refresh")
    """

    user_id: str
    role: str | None = None
    exp: int = 0
    iat: int = 0
    type: str = "access"


@dataclass
class TokenPair:
    """A pair of access and refresh tokens.

    Attributes:
        access_token: Short-lived token for API access (15 min)
        refresh_token: Long-lived token for getting new access tokens (7 days)
        token_type: Always "Bearer"
        expires_in: Access token TTL in seconds
    """

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 900  # 15 minutes

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
        }


@dataclass
class UserContext:
    """The caller of an API request.

    Attributes:
        user_id: The authenticated user's ID
        roles: Role names the user has
    """

    user_id: str | None = None
    roles: list[str] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles


@dataclass
class User:
    """A registered user."""

    id: str
    email: str
    name: str
    password_hash: str
    role: str = "user"
    active: bool = True
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to API response dict (never includes the hash)."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "active": self.active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
