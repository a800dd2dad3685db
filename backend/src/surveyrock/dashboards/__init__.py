"""Dashboards and the tiles placed on them."""

from surveyrock.dashboards.types import Dashboard, Tile
from surveyrock.dashboards.store import DashboardStore

__all__ = ["Dashboard", "Tile", "DashboardStore"]
