"""Tests for SurveyRock CLI commands."""

import json
import textwrap

import pytest
from click.testing import CliRunner

from surveyrock.cli.main import cli

DEFINITION = """
schema:
  orders:
    - {name: region, type: varchar}
    - {name: amount, type: numeric}
tile:
  title: Revenue by region
  kind: %(kind)s
  connectionId: warehouse
  dimensions: [orders.region]
  measures: %(measures)s
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def definition(tmp_path):
    def _make(kind="chart", measures="[orders.amount]"):
        path = tmp_path / "tile.yaml"
        path.write_text(textwrap.dedent(DEFINITION % {"kind": kind, "measures": measures}))
        return str(path)

    return _make


class TestTilesSql:
    def test_prints_sql(self, runner, definition):
        result = runner.invoke(cli, ["tiles", "sql", definition()])
        assert result.exit_code == 0
        assert (
            "SELECT orders.region, sum(orders.amount) as amount_sum "
            "FROM orders GROUP BY orders.region"
        ) in result.output

    def test_prints_config(self, runner, definition):
        result = runner.invoke(cli, ["tiles", "sql", "--config", definition(kind="table")])
        assert result.exit_code == 0
        assert '"uiChartType": "table"' in result.output

    def test_bad_definition_fails(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("schema: {}\n")
        result = runner.invoke(cli, ["tiles", "sql", str(path)])
        assert result.exit_code == 1


class TestTilesValidate:
    def test_valid_tile(self, runner, definition):
        result = runner.invoke(cli, ["tiles", "validate", definition()])
        assert result.exit_code == 0
        assert "is valid" in result.output

    def test_invalid_metric(self, runner, definition):
        result = runner.invoke(cli, ["tiles", "validate", definition(kind="metric", measures="[]")])
        assert result.exit_code == 1
        assert "MEASURE_REQUIRED" in result.output

    def test_payload_output(self, runner, definition):
        result = runner.invoke(
            cli, ["tiles", "validate", "--payload", "--dashboard", "d1", definition(kind="metric")]
        )
        assert result.exit_code == 0
        payload = json.loads(result.output[result.output.index("{"):])
        assert payload["type"] == "kpi"
        assert payload["dashboardId"] == "d1"


class TestUsersCreate:
    def test_create_user(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("SURVEYROCK_DB_PATH", str(tmp_path / "app.db"))
        monkeypatch.delenv("DATABASE_URL", raising=False)
        result = runner.invoke(
            cli,
            ["users", "create", "--email", "Ana@Example.com", "--name", "Ana",
             "--password", "correct-horse", "--role", "admin"],
        )
        assert result.exit_code == 0, result.output
        assert "Created admin user ana@example.com" in result.output

        duplicate = runner.invoke(
            cli,
            ["users", "create", "--email", "ana@example.com", "--name", "Ana",
             "--password", "correct-horse"],
        )
        assert duplicate.exit_code == 1

    def test_weak_password(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("SURVEYROCK_DB_PATH", str(tmp_path / "app.db"))
        result = runner.invoke(
            cli, ["users", "create", "--email", "a@b.c", "--name", "A", "--password", "short"]
        )
        assert result.exit_code == 1
