"""Grafana dashboard assembly."""

from promdash.dashboards.builder import build_dashboard, process_panels, process_variables
from promdash.dashboards.models import Panel, Target
from promdash.dashboards.panels import (
    DashboardAssemblyError,
    PanelGenerator,
    infer_unit,
    map_visualization_type,
)

__all__ = [
    "DashboardAssemblyError",
    "Panel",
    "PanelGenerator",
    "Target",
    "build_dashboard",
    "infer_unit",
    "map_visualization_type",
    "process_panels",
    "process_variables",
]
