"""Persistence layer - database configuration and store base class."""

from surveyrock.persistence.config import DatabaseConfig
from surveyrock.persistence.store import SqlStore

__all__ = ["DatabaseConfig", "SqlStore"]
