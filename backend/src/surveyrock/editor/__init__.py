"""Tile editor API client and per-dialog editor session."""

from surveyrock.editor.client import ApiError, BearerTokenAuth, SurveyRockClient
from surveyrock.editor.session import TileEditorSession

__all__ = [
    "ApiError",
    "BearerTokenAuth",
    "SurveyRockClient",
    "TileEditorSession",
]
