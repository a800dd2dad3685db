"""JWT token generation and validation service."""

import time

import jwt

from surveyrock.auth.types import TokenClaims, TokenPair


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid or malformed."""

    pass


class JWTService:
    """Issues and validates HS256 access/refresh tokens."""

    ACCESS_TOKEN_TTL = 15 * 60  # 15 minutes
    REFRESH_TOKEN_TTL = 7 * 24 * 60 * 60  # 7 days

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens (should be at least 32 chars)
            algorithm: JWT algorithm (default HS256)
        """
        self._secret_key = secret_key
        self._algorithm = algorithm

    def _encode(self, user_id: str, token_type: str, ttl: int, role: str | None = None) -> str:
        now = int(time.time())
        claims = {
            "sub": user_id,
            "iat": now,
            "exp": now + ttl,
            "type": token_type,
        }
        if role:
            claims["role"] = role
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def generate_token_pair(self, user_id: str, role: str | None = None) -> TokenPair:
        """Generate a new access/refresh token pair.

        The role is only embedded in the access token; it is looked up
        again when the refresh token is exchanged.
        """
        return TokenPair(
            access_token=self._encode(user_id, "access", self.ACCESS_TOKEN_TTL, role),
            refresh_token=self._encode(user_id, "refresh", self.REFRESH_TOKEN_TTL),
            expires_in=self.ACCESS_TOKEN_TTL,
        )

    def decode_token(self, token: str) -> TokenClaims:
        """Decode and validate a JWT token.

        Raises:
            TokenExpiredError: If the token has expired
            InvalidTokenError: If the token is invalid or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        return TokenClaims(
            user_id=payload.get("sub", ""),
            role=payload.get("role"),
            exp=payload.get("exp", 0),
            iat=payload.get("iat", 0),
            type=payload.get("type", "access"),
        )

    def validate_refresh_token(self, token: str) -> str:
        """Validate a refresh token and return the user ID.

        Raises:
            TokenExpiredError: If the token has expired
            InvalidTokenError: If the token is invalid or not a refresh token
        """
        claims = self.decode_token(token)
        if claims.type != "refresh":
            raise InvalidTokenError("Not a refresh token")
        return claims.user_id
