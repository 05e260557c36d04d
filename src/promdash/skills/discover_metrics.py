"""discover_metrics: list metrics on a Prometheus server with optional filters."""

from __future__ import annotations

import re
from typing import Any, Dict

import structlog

from promdash.core.errors import ProviderError
from promdash.promql.models import MetricType
from promdash.skills.base import ToolContext, ToolInputError, optional_string, require_string, to_json

logger = structlog.get_logger()

FILTERABLE_TYPES = ("counter", "gauge", "histogram", "summary")


class DiscoverMetricsTool:
    def __init__(self, ctx: ToolContext) -> None:
        self._ctx = ctx

    @property
    def name(self) -> str:
        return "discover_metrics"

    @property
    def description(self) -> str:
        return "Discovers available metrics from a Prometheus endpoint with optional filtering"

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "metric_type": {
                    "description": "Optional metric type filter (counter, gauge, histogram, summary)",
                    "enum": list(FILTERABLE_TYPES),
                    "type": "string",
                },
                "name_pattern": {
                    "description": "Optional regex pattern to filter metrics by name",
                    "type": "string",
                },
                "prometheus_url": {
                    "description": "Prometheus server URL to discover metrics from",
                    "type": "string",
                },
            },
            "required": ["prometheus_url"],
        }

    async def handle(self, args: Dict[str, Any]) -> str:
        logger.info("discovering_metrics")

        prometheus_url = require_string(args, "prometheus_url")
        name_pattern = optional_string(args, "name_pattern")
        metric_type_arg = optional_string(args, "metric_type")

        try:
            pattern = re.compile(name_pattern) if name_pattern else None
        except re.error as exc:
            raise ToolInputError(f"invalid name_pattern: {exc}") from exc

        # Unrecognised types filter on "unknown".
        metric_type = MetricType.parse(metric_type_arg) if metric_type_arg else None

        try:
            metrics = await self._ctx.service.discover_metrics(prometheus_url, pattern, metric_type)
        except ProviderError as exc:
            logger.error("metric_discovery_failed", prometheus_url=prometheus_url, error=str(exc))
            raise ProviderError(f"failed to discover metrics: {exc}") from exc

        response: Dict[str, Any] = {
            "prometheus_url": prometheus_url,
            "total_metrics": len(metrics),
            "metrics": [m.model_dump(mode="json") for m in metrics],
        }
        if name_pattern or metric_type_arg:
            filters = {}
            if name_pattern:
                filters["name_pattern"] = name_pattern
            if metric_type_arg:
                filters["metric_type"] = metric_type_arg
            response["filters"] = filters

        return to_json(response)
