"""
Grafana dashboard document assembly.

Turns loosely specified panel and variable definitions (as received from a
tool call) into the save envelope accepted by ``POST /api/dashboards/db``.
Anything missing from a panel gets a Grafana default.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

DEFAULT_TIME_RANGE = {"from": "now-6h", "to": "now"}
DEFAULT_REFRESH = "5s"
SCHEMA_VERSION = 36
GRID_WIDTH = 12
GRID_HEIGHT = 8


def _string_or_default(values: Dict[str, Any], key: str, default: str) -> str:
    value = values.get(key)
    if isinstance(value, str) and value:
        return value
    return default


def normalize_tags(tags: Any) -> List[str]:
    if not isinstance(tags, list):
        return []
    return [tag for tag in tags if isinstance(tag, str)]


def normalize_time_range(time_range: Any) -> Dict[str, str]:
    if not isinstance(time_range, dict):
        return dict(DEFAULT_TIME_RANGE)
    return {
        "from": _string_or_default(time_range, "from", DEFAULT_TIME_RANGE["from"]),
        "to": _string_or_default(time_range, "to", DEFAULT_TIME_RANGE["to"]),
    }


def grid_position(panel: Dict[str, Any], index: int) -> Dict[str, Any]:
    """Explicit gridPos, or a two-column layout of 12x8 cells."""
    grid_pos = panel.get("gridPos")
    if isinstance(grid_pos, dict):
        return grid_pos

    return {
        "x": (index % 2) * GRID_WIDTH,
        "y": (index // 2) * GRID_HEIGHT,
        "w": GRID_WIDTH,
        "h": GRID_HEIGHT,
    }


def _targets(panel: Dict[str, Any]) -> List[Any]:
    targets = panel.get("targets")
    if isinstance(targets, list):
        return targets
    return [{"refId": "A", "expr": ""}]


def _options(panel: Dict[str, Any]) -> Dict[str, Any]:
    options = panel.get("options")
    if isinstance(options, dict):
        return options
    return {"legend": {"displayMode": "list", "placement": "bottom"}}


def _field_config(panel: Dict[str, Any]) -> Dict[str, Any]:
    field_config = panel.get("fieldConfig")
    if isinstance(field_config, dict):
        return field_config
    return {
        "defaults": {
            "color": {"mode": "palette-classic"},
            "custom": {
                "drawStyle": "line",
                "lineInterpolation": "linear",
                "fillOpacity": 0,
            },
        },
        "overrides": [],
    }


def process_panels(panels: Sequence[Any]) -> List[Dict[str, Any]]:
    """Convert panel definitions to Grafana panels; non-dict entries are dropped."""
    result = []
    for index, panel in enumerate(panels):
        if not isinstance(panel, dict):
            continue

        processed: Dict[str, Any] = {
            "id": index + 1,
            "type": _string_or_default(panel, "type", "timeseries"),
            "title": _string_or_default(panel, "title", f"Panel {index + 1}"),
            "gridPos": grid_position(panel, index),
            "targets": _targets(panel),
            "options": _options(panel),
            "fieldConfig": _field_config(panel),
        }
        description = panel.get("description")
        if isinstance(description, str) and description:
            processed["description"] = description

        result.append(processed)
    return result


def process_variables(variables: Sequence[Any]) -> List[Dict[str, Any]]:
    """Convert variable definitions to Grafana template variables."""
    result = []
    for variable in variables:
        if not isinstance(variable, dict):
            continue

        processed = {
            "name": _string_or_default(variable, "name", "var"),
            "type": _string_or_default(variable, "type", "query"),
            "label": _string_or_default(variable, "label", ""),
        }
        for key in ("query", "datasource"):
            value = variable.get(key)
            if isinstance(value, str) and value:
                processed[key] = value

        result.append(processed)
    return result


def build_dashboard(
    title: str,
    panels: Sequence[Any],
    *,
    description: Optional[str] = None,
    tags: Any = None,
    time_range: Any = None,
    refresh_interval: Optional[str] = None,
    variables: Any = None,
) -> Dict[str, Any]:
    """
    Build a Grafana dashboard save envelope.

    Args:
        title: Dashboard title
        panels: Panel definitions (dicts with title, type, targets, ...)
        description: Optional dashboard description
        tags: Tags; non-string entries are ignored
        time_range: ``{"from": ..., "to": ...}``; defaults to the last 6 hours
        refresh_interval: Auto-refresh interval, default "5s"
        variables: Template variable definitions

    Returns:
        ``{"dashboard": {...}, "folderUid": "", "message": "", "overwrite": False}``
    """
    dashboard: Dict[str, Any] = {
        "title": title,
        "tags": normalize_tags(tags),
        "timezone": "browser",
        "panels": process_panels(panels),
        "time": normalize_time_range(time_range),
        "refresh": refresh_interval or DEFAULT_REFRESH,
        "schemaVersion": SCHEMA_VERSION,
        "version": 0,
        "editable": True,
        "fiscalYearStartMonth": 0,
        "graphTooltip": 0,
        "links": [],
        "liveNow": False,
    }

    if description:
        dashboard["description"] = description

    if isinstance(variables, list) and variables:
        dashboard["templating"] = {"list": process_variables(variables)}

    return {
        "dashboard": dashboard,
        "folderUid": "",
        "message": "",
        "overwrite": False,
    }
