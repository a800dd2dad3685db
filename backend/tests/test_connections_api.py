"""Integration tests for connection endpoints and schema introspection."""

from pathlib import Path

import pytest
import sqlalchemy as sa
from fastapi.testclient import TestClient


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Create test client with fresh database and auth disabled."""
    monkeypatch.setenv("SURVEYROCK_DB_PATH", str(tmp_path / "app.db"))
    monkeypatch.setenv("SURVEYROCK_DISABLE_AUTH", "1")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.chdir(Path(__file__).parent.parent)

    from surveyrock.api.app import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def warehouse(tmp_path) -> str:
    """A SQLite database to register as a tile data source."""
    path = tmp_path / "warehouse.db"
    engine = sa.create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        conn.execute(sa.text(
            "CREATE TABLE orders (id INTEGER PRIMARY KEY, region VARCHAR(20), amount NUMERIC(10, 2))"
        ))
        conn.execute(sa.text("CREATE TABLE customers (id INTEGER PRIMARY KEY, email TEXT)"))
    engine.dispose()
    return str(path)


def _register(client, database: str, name: str = "Warehouse") -> dict:
    response = client.post(
        "/api/connections",
        json={"name": name, "type": "sqlite", "database": database, "password": "secret"},
    )
    assert response.status_code == 201
    return response.json()["data"]


class TestConnectionCrud:
    def test_create_and_list(self, client, warehouse):
        created = _register(client, warehouse)
        assert created["status"] == "active"
        assert created["hasPassword"] is True
        assert "password" not in created

        listed = client.get("/api/connections").json()["data"]
        assert [c["id"] for c in listed] == [created["id"]]

    def test_update(self, client, warehouse):
        created = _register(client, warehouse)
        response = client.put(f"/api/connections/{created['id']}", json={"name": "Renamed", "status": "inactive"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Renamed"
        assert data["status"] == "inactive"
        assert data["database"] == warehouse

    def test_delete(self, client, warehouse):
        created = _register(client, warehouse)
        assert client.delete(f"/api/connections/{created['id']}").status_code == 200
        assert client.get(f"/api/connections/{created['id']}").status_code == 404

    def test_unknown_type_rejected(self, client):
        response = client.post("/api/connections", json={"name": "X", "type": "oracle", "database": "x"})
        assert response.status_code == 422


class TestConnectionTest:
    def test_reachable_database_is_active(self, client, warehouse):
        created = _register(client, warehouse)
        response = client.post(f"/api/connections/{created['id']}/test")
        assert response.json() == {"success": True}

    def test_unreachable_database_marked_error(self, client, tmp_path):
        created = _register(client, str(tmp_path / "missing" / "nowhere.db"))
        response = client.post(f"/api/connections/{created['id']}/test")
        assert response.json()["success"] is False

        data = client.get(f"/api/connections/{created['id']}").json()["data"]
        assert data["status"] == "error"
        assert data["lastError"]


class TestSchemaIntrospection:
    def test_schema_listing(self, client, warehouse):
        created = _register(client, warehouse)
        body = client.get(f"/api/connections/{created['id']}/schema").json()
        assert body["success"] is True
        assert body["data"]["schemas"] == ["main"]
        assert body["data"]["tables"] == {"main": ["customers", "orders"]}

    def test_table_columns(self, client, warehouse):
        created = _register(client, warehouse)
        body = client.get(f"/api/connections/{created['id']}/schema/main/orders").json()
        assert body["success"] is True
        columns = {c["name"]: c for c in body["data"]}
        assert list(columns) == ["id", "region", "amount"]
        assert columns["amount"]["type"].startswith("NUMERIC")
        assert columns["region"]["nullable"] is True

    def test_missing_table(self, client, warehouse):
        created = _register(client, warehouse)
        response = client.get(f"/api/connections/{created['id']}/schema/main/nope")
        assert response.status_code == 404

    def test_unknown_connection(self, client):
        assert client.get("/api/connections/missing/schema").status_code == 404
