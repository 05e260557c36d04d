"""
Panel generation from metric names.

For every metric: fetch metadata, generate and enhance queries, keep the
best one (validated against Prometheus) as target A and attach up to three
further suggestions that Prometheus accepts. Metrics are processed one at a
time; a failure for one metric only degrades that metric's panel.
"""

from __future__ import annotations

import string
from typing import Any, Iterable, List

import structlog

from promdash.core.errors import ProviderError, ValidationError
from promdash.dashboards.models import Panel, Target
from promdash.promql.service import PromQLService

logger = structlog.get_logger()

MAX_EXTRA_TARGETS = 3
PANEL_TYPES = ("timeseries", "stat", "gauge", "table")


class DashboardAssemblyError(ValidationError):
    """Raised when no panel could be built."""


def map_visualization_type(visualization_type: str) -> str:
    """Map a suggestion's visualization type to a Grafana panel type."""
    if visualization_type in PANEL_TYPES:
        return visualization_type
    return "timeseries"


def infer_unit(metric_name: str, y_axis_label: str) -> str:
    """Pick a Grafana unit from the metric name and axis label."""
    if (
        "duration" in metric_name
        or "latency" in metric_name
        or "duration" in y_axis_label
        or "time" in y_axis_label
    ):
        return "s"

    if "per second" in y_axis_label or "requests/sec" in y_axis_label:
        return "reqps"

    if "ratio" in metric_name or "percent" in metric_name or "percent" in y_axis_label:
        return "percent"

    if "bytes" in metric_name or "size" in metric_name or "memory" in metric_name:
        return "bytes"

    if "cpu" in metric_name:
        return "percent"

    return "short"


class PanelGenerator:
    """Builds dashboard panels from metric names using the PromQL service."""

    def __init__(self, service: PromQLService) -> None:
        self._service = service

    async def generate_panels(self, metric_names: Iterable[Any], prometheus_url: str) -> List[dict[str, Any]]:
        panels: List[dict[str, Any]] = []
        requested = 0

        for metric_name in metric_names:
            requested += 1
            if not isinstance(metric_name, str):
                logger.warning("skipping_non_string_metric_name", metric=repr(metric_name))
                continue

            panel = await self.panel_for_metric(metric_name, prometheus_url)
            if panel is not None:
                panels.append(panel.to_dict())

        if not panels:
            raise DashboardAssemblyError("no valid panels could be generated from the provided metric names")

        logger.info("generated_panels_from_metrics", metric_count=requested, panel_count=len(panels))
        return panels

    async def panel_for_metric(self, metric_name: str, prometheus_url: str) -> Panel | None:
        try:
            info = await self._service.get_metric_metadata(prometheus_url, metric_name)
        except ProviderError as exc:
            logger.warning("metric_metadata_fetch_failed", metric=metric_name, error=str(exc))
            return Panel(title=metric_name, targets=[Target(expr=metric_name)])

        suggestions = self._service.generate_queries(info)
        if not suggestions:
            return None

        enhanced = self._service.enhance_queries(info, suggestions)
        best = self._service.get_best_query(enhanced)

        expr = best.query
        if not await self._is_valid(prometheus_url, expr):
            logger.warning("generated_query_failed_validation", metric=metric_name, query=expr)
            expr = metric_name

        panel = Panel(
            title=f"{metric_name} - {best.description}",
            panel_type=map_visualization_type(best.visualization_type),
            targets=[Target(expr=expr)],
            unit=infer_unit(metric_name, best.y_axis_label),
            description=info.help if info.has_metadata else None,
        )

        if len(enhanced) > 1:
            panel.targets = [Target(expr=expr, legend_format=best.description)]
            extra_ref_ids = string.ascii_uppercase[1:]
            for position, suggestion in enumerate(enhanced[1 : 1 + MAX_EXTRA_TARGETS]):
                if not await self._is_valid(prometheus_url, suggestion.query):
                    continue
                panel.targets.append(
                    Target(
                        expr=suggestion.query,
                        ref_id=extra_ref_ids[position],
                        legend_format=suggestion.description,
                    )
                )

        return panel

    async def _is_valid(self, prometheus_url: str, query: str) -> bool:
        try:
            await self._service.validate_query(prometheus_url, query)
        except ProviderError as exc:
            logger.debug("query_rejected", query=query, error=str(exc))
            return False
        return True
