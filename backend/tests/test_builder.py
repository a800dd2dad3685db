"""Tests for tile configuration building and restoring."""

from surveyrock.tiles.builder import (
    EditorState,
    build_configuration,
    build_tile_payload,
    restore_editor_state,
    to_backend_kind,
)
from surveyrock.tiles.types import DatabaseField, PersistedTileKind, TextRow, UiTileKind

REGION = DatabaseField(name="region", type="varchar", table="orders")
AMOUNT = DatabaseField(name="amount", type="numeric", table="orders")


def _chart_state(kind=UiTileKind.CHART, chart_type="bar") -> EditorState:
    state = EditorState(title="Revenue", kind=kind, chart_type=chart_type, connection_id="c1")
    state.selection.add_dimension(REGION)
    state.selection.add_measure(AMOUNT)
    return state


class TestKindMapping:
    def test_ui_to_backend(self):
        assert to_backend_kind(UiTileKind.CHART) == PersistedTileKind.CHART
        assert to_backend_kind(UiTileKind.TABLE) == PersistedTileKind.CHART
        assert to_backend_kind(UiTileKind.METRIC) == PersistedTileKind.KPI
        assert to_backend_kind(UiTileKind.TEXT) == PersistedTileKind.TEXT
        assert to_backend_kind(UiTileKind.QUERY) == PersistedTileKind.TEXT


class TestBuildConfiguration:
    def test_chart_config(self):
        config = build_configuration(_chart_state(chart_type="line")).to_dict()
        assert config["chartType"] == "line"
        assert config["uiChartType"] == "line"
        assert config["uiType"] == "chart"
        assert config["dimensions"][0]["fieldId"] == "orders.region"
        assert config["measures"][0]["alias"] == "amount_sum"
        assert config["metadata"]["sqlQuery"].startswith("SELECT orders.region")

    def test_table_config_keeps_ui_chart_type(self):
        config = build_configuration(_chart_state(kind=UiTileKind.TABLE, chart_type="table")).to_dict()
        assert config["chartType"] == "bar"
        assert config["uiChartType"] == "table"
        assert config["uiType"] == "table"

    def test_metric_uses_first_measure(self):
        state = EditorState(title="Total", kind=UiTileKind.METRIC, connection_id="c1")
        state.selection.add_measure(AMOUNT)
        state.selection.add_measure(DatabaseField(name="qty", type="int", table="orders"))
        config = build_configuration(state).to_dict()
        assert config["measure"]["fieldId"] == "orders.amount"
        assert "measures" not in config

    def test_query_mode_config(self):
        state = EditorState(
            title="Raw", kind=UiTileKind.QUERY, is_query_mode=True,
            custom_query="SELECT 1", connection_id="c1",
        )
        config = build_configuration(state).to_dict()
        assert config["customQuery"] == "SELECT 1"
        assert config["isQueryMode"] is True
        assert config["metadata"]["sqlQuery"] == "SELECT 1"

    def test_text_config(self):
        state = EditorState(title="Intro", kind=UiTileKind.TEXT)
        state.text_rows = [TextRow(id="1", type="header", content="Welcome")]
        config = build_configuration(state).to_dict()
        assert config["textRows"] == [
            {"id": "1", "type": "header", "content": "Welcome", "isQuery": False}
        ]
        assert config["isQueryMode"] is False
        assert "metadata" not in config


class TestBuildPayload:
    def test_payload_shape(self):
        state = _chart_state()
        state.position = {"x": 0, "y": 0, "w": 4, "h": 3}
        payload = build_tile_payload(state, "dash-1")
        assert payload["title"] == "Revenue"
        assert payload["type"] == "chart"
        assert payload["dashboardId"] == "dash-1"
        assert payload["connectionId"] == "c1"
        assert payload["position"] == {"x": 0, "y": 0, "w": 4, "h": 3}
        assert "description" not in payload

    def test_metric_payload_is_kpi(self):
        state = EditorState(title="Total", kind=UiTileKind.METRIC, connection_id="c1")
        state.selection.add_measure(AMOUNT)
        assert build_tile_payload(state, "d")["type"] == "kpi"


class TestRoundTrip:
    def test_table_tile_restores_as_table(self):
        payload = build_tile_payload(_chart_state(kind=UiTileKind.TABLE, chart_type="table"), "d")
        state = restore_editor_state(payload)
        assert state.kind == UiTileKind.TABLE
        assert state.chart_type == "table"
        assert [d.field_id for d in state.selection.dimensions] == ["orders.region"]
        assert state.selection.to_sql() == (
            "SELECT orders.region, sum(orders.amount) as amount_sum "
            "FROM orders GROUP BY orders.region"
        )

    def test_query_tile_restores_as_query(self):
        state = EditorState(
            title="Raw", kind=UiTileKind.QUERY, is_query_mode=True,
            custom_query="SELECT 1", connection_id="c1",
        )
        restored = restore_editor_state(build_tile_payload(state, "d"))
        assert restored.kind == UiTileKind.QUERY
        assert restored.is_query_mode is True
        assert restored.custom_query == "SELECT 1"
        assert restored.connection_id == "c1"

    def test_metric_measure_restored(self):
        state = EditorState(title="Total", kind=UiTileKind.METRIC, connection_id="c1")
        state.selection.add_measure(AMOUNT)
        restored = restore_editor_state(build_tile_payload(state, "d"))
        assert restored.kind == UiTileKind.METRIC
        assert [m.field_id for m in restored.selection.measures] == ["orders.amount"]

    def test_legacy_tiles_use_backend_mapping(self):
        assert restore_editor_state({"type": "kpi", "config": {}}).kind == UiTileKind.METRIC
        assert restore_editor_state({"type": "text", "config": {}}).kind == UiTileKind.TEXT
        legacy_chart = restore_editor_state({"type": "chart", "config": {"chartType": "pie"}})
        assert legacy_chart.kind == UiTileKind.CHART
        assert legacy_chart.chart_type == "pie"

    def test_table_chart_type_without_ui_type_restores_as_table(self):
        state = restore_editor_state({"type": "chart", "config": {"uiChartType": "table"}})
        assert state.kind == UiTileKind.TABLE
