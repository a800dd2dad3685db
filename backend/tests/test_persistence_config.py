"""Tests for database configuration and settings."""

from pathlib import Path

from surveyrock.persistence.config import DatabaseConfig
from surveyrock.settings import Settings


class TestDatabaseConfig:
    def test_database_url_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/app")
        monkeypatch.setenv("SURVEYROCK_DB_PATH", "/tmp/ignored.db")
        config = DatabaseConfig.from_env()
        assert config.is_postgresql
        assert config.sqlalchemy_url == "postgresql+psycopg://u:p@db/app"
        assert config.sqlite_path is None

    def test_db_path(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("SURVEYROCK_DB_PATH", "/tmp/app.db")
        config = DatabaseConfig.from_env()
        assert config.url == "sqlite:////tmp/app.db"
        assert config.sqlite_path == Path("/tmp/app.db")

    def test_default_under_base_path(self, monkeypatch, tmp_path):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("SURVEYROCK_DB_PATH", raising=False)
        config = DatabaseConfig.from_env(tmp_path)
        assert config.is_sqlite
        assert config.sqlite_path == tmp_path / "data" / "surveyrock.db"

    def test_memory_database_has_no_path(self):
        assert DatabaseConfig("sqlite:///:memory:").sqlite_path is None


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SURVEYROCK_SECRET_KEY", "SURVEYROCK_DISABLE_AUTH", "SURVEYROCK_CORS_ORIGINS", "SURVEYROCK_PORT"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings.from_env()
        assert settings.disable_auth is False
        assert settings.cors_origins == ["http://localhost:5173"]
        assert settings.port == 8000

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SURVEYROCK_DISABLE_AUTH", "true")
        monkeypatch.setenv("SURVEYROCK_CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("SURVEYROCK_PORT", "9001")
        settings = Settings.from_env()
        assert settings.disable_auth is True
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.port == 9001
