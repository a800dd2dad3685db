"""API module for SurveyRock."""

from surveyrock.api.app import app

__all__ = ["app"]
