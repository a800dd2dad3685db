"""Tests for numeric field classification."""

import pytest

from surveyrock.tiles.classifier import is_numeric
from surveyrock.tiles.types import DatabaseField


def _field(type_name: str) -> DatabaseField:
    return DatabaseField(name="col", type=type_name, table="t")


class TestIsNumeric:
    @pytest.mark.parametrize(
        "type_name",
        ["BIGINT", "integer", "INT4", "numeric(10,2)", "DOUBLE PRECISION", "real", "Float", "smallint"],
    )
    def test_numeric_types(self, type_name):
        assert is_numeric(_field(type_name)) is True

    @pytest.mark.parametrize("type_name", ["VARCHAR", "text", "timestamp", "boolean", "uuid"])
    def test_non_numeric_types(self, type_name):
        assert is_numeric(_field(type_name)) is False

    def test_empty_type_is_not_numeric(self):
        assert is_numeric(_field("")) is False

    def test_missing_field_is_not_numeric(self):
        assert is_numeric(None) is False
