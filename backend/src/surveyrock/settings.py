"""Application settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"
DEFAULT_CORS_ORIGINS = ["http://localhost:5173"]


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


@dataclass
class Settings:
    """Runtime settings for the API."""

    secret_key: str = DEFAULT_SECRET_KEY
    disable_auth: bool = False
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    port: int = 8000
    log_level: str = "debug"

    @classmethod
    def from_env(cls) -> Settings:
        """Create settings from SURVEYROCK_* environment variables.

        SURVEYROCK_CORS_ORIGINS is a comma-separated list of origins.
        """
        origins = os.environ.get("SURVEYROCK_CORS_ORIGINS")
        return cls(
            secret_key=os.environ.get("SURVEYROCK_SECRET_KEY", DEFAULT_SECRET_KEY),
            disable_auth=_env_flag("SURVEYROCK_DISABLE_AUTH"),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins
                else list(DEFAULT_CORS_ORIGINS)
            ),
            port=int(os.environ.get("SURVEYROCK_PORT", "8000")),
            log_level=os.environ.get("SURVEYROCK_LOG_LEVEL", "debug"),
        )
