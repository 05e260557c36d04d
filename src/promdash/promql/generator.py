"""
PromQL query generation.

Produces type-specific candidate queries for a metric. The first suggestion
of every list is the primary query for that metric type; dashboard
assembly relies on that ordering.
"""

from __future__ import annotations

from typing import Callable, List

from .classifier import looks_like_counter
from .models import MetricInfo, MetricType, QuerySuggestion

HISTOGRAM_QUANTILES = ("0.50", "0.95", "0.99")
SUMMARY_QUANTILES = ("0.5", "0.9", "0.95", "0.99")

_PERCENTILE_DESCRIPTIONS = {
    "0.50": "50th percentile (median) over 5 minutes",
    "0.95": "95th percentile over 5 minutes",
    "0.99": "99th percentile over 5 minutes",
}


def is_groupable_label(label: str) -> bool:
    """Reserved labels (``__name__`` and other ``__`` names) are never grouped on."""
    return label != "__name__" and not label.startswith("__")


def _trim_suffix(name: str, suffix: str) -> str:
    if name.endswith(suffix):
        return name[: -len(suffix)]
    return name


class QueryGenerator:
    """Generates candidate PromQL queries based on metric type."""

    def __init__(self) -> None:
        self._generators: dict[MetricType, Callable[[MetricInfo], List[QuerySuggestion]]] = {
            MetricType.COUNTER: self.counter_queries,
            MetricType.GAUGE: self.gauge_queries,
            MetricType.HISTOGRAM: self.histogram_queries,
            MetricType.SUMMARY: self.summary_queries,
        }

    def generate(self, info: MetricInfo) -> List[QuerySuggestion]:
        generator = self._generators.get(info.type, self.default_queries)
        return generator(info)

    def counter_queries(self, info: MetricInfo) -> List[QuerySuggestion]:
        name = info.name
        suggestions = [
            QuerySuggestion(
                query=f"rate({name}[5m])",
                description="Rate per second over 5 minutes",
                visualization_type="timeseries",
                y_axis_label="per second",
            ),
            QuerySuggestion(
                query=f"increase({name}[1h])",
                description="Total increase over 1 hour",
                visualization_type="timeseries",
                y_axis_label="total",
            ),
        ]

        for label in info.labels:
            if is_groupable_label(label):
                suggestions.append(
                    QuerySuggestion(
                        query=f"sum by ({label}) (rate({name}[5m]))",
                        description=f"Rate per second grouped by {label}",
                        visualization_type="timeseries",
                        y_axis_label="per second",
                    )
                )

        return suggestions

    def gauge_queries(self, info: MetricInfo) -> List[QuerySuggestion]:
        name = info.name
        suggestions = [
            QuerySuggestion(
                query=name,
                description="Current value",
                visualization_type="timeseries",
                y_axis_label="value",
            ),
            QuerySuggestion(
                query=f"avg_over_time({name}[1h])",
                description="Average over 1 hour",
                visualization_type="timeseries",
                y_axis_label="avg value",
            ),
        ]

        if not info.labels:
            return suggestions

        suggestions.extend(
            [
                QuerySuggestion(
                    query=f"avg({name})",
                    description="Average across all instances",
                    visualization_type="stat",
                    y_axis_label="avg value",
                ),
                QuerySuggestion(
                    query=f"max({name})",
                    description="Maximum value",
                    visualization_type="stat",
                    y_axis_label="max value",
                ),
                QuerySuggestion(
                    query=f"min({name})",
                    description="Minimum value",
                    visualization_type="stat",
                    y_axis_label="min value",
                ),
            ]
        )

        for label in info.labels:
            if is_groupable_label(label):
                suggestions.append(
                    QuerySuggestion(
                        query=f"avg by ({label}) ({name})",
                        description=f"Average grouped by {label}",
                        visualization_type="timeseries",
                        y_axis_label="avg value",
                    )
                )

        return suggestions

    def histogram_queries(self, info: MetricInfo) -> List[QuerySuggestion]:
        base = info.name
        for suffix in ("_bucket", "_count", "_sum"):
            base = _trim_suffix(base, suffix)

        suggestions = [
            QuerySuggestion(
                query=f"histogram_quantile({q}, rate({base}_bucket[5m]))",
                description=_PERCENTILE_DESCRIPTIONS[q],
                visualization_type="timeseries",
                y_axis_label="duration",
            )
            for q in HISTOGRAM_QUANTILES
        ]
        suggestions.append(
            QuerySuggestion(
                query=f"rate({base}_count[5m])",
                description="Request rate (requests per second)",
                visualization_type="timeseries",
                y_axis_label="requests/sec",
            )
        )
        suggestions.append(
            QuerySuggestion(
                query=f"rate({base}_sum[5m]) / rate({base}_count[5m])",
                description="Average duration",
                visualization_type="timeseries",
                y_axis_label="avg duration",
            )
        )
        return suggestions

    def summary_queries(self, info: MetricInfo) -> List[QuerySuggestion]:
        base = _trim_suffix(_trim_suffix(info.name, "_count"), "_sum")

        suggestions = [
            QuerySuggestion(
                query=f"rate({base}_count[5m])",
                description="Request rate (requests per second)",
                visualization_type="timeseries",
                y_axis_label="requests/sec",
            ),
            QuerySuggestion(
                query=f"rate({base}_sum[5m]) / rate({base}_count[5m])",
                description="Average value",
                visualization_type="timeseries",
                y_axis_label="avg value",
            ),
        ]

        # Emitted whether or not the series actually carries these quantiles.
        for quantile in SUMMARY_QUANTILES:
            suggestions.append(
                QuerySuggestion(
                    query=f'{base}{{quantile="{quantile}"}}',
                    description=f"{quantile} quantile",
                    visualization_type="timeseries",
                    y_axis_label="value",
                )
            )

        return suggestions

    def default_queries(self, info: MetricInfo) -> List[QuerySuggestion]:
        if looks_like_counter(info.name):
            return self.counter_queries(info)

        return [
            QuerySuggestion(
                query=info.name,
                description="Raw metric value",
                visualization_type="timeseries",
                y_axis_label="value",
            ),
            QuerySuggestion(
                query=f"rate({info.name}[5m])",
                description="Rate of change over 5 minutes",
                visualization_type="timeseries",
                y_axis_label="per second",
            ),
        ]


_default_generator = QueryGenerator()


def generate_queries(info: MetricInfo) -> List[QuerySuggestion]:
    """Generate candidate queries for a metric using the default generator."""
    return _default_generator.generate(info)
