"""
Rule-based query enhancement.

Rewrites descriptions, tunes query text and visualization types for each
generated suggestion, then appends contextual SLO/alerting queries derived
from the metric itself. Every rule is a substring check and every chain is
first-match-wins; the order of the checks below decides the outcome for
names that match several rules.
"""

from __future__ import annotations

import logging
import re
from typing import List, Sequence

from .models import MetricInfo, MetricType, QuerySuggestion

logger = logging.getLogger(__name__)

# Checked in order, first hit wins.
_PERCENTILES = (
    ("0.50", "50th"),
    ("0.95", "95th"),
    ("0.99", "99th"),
    ("0.90", "90th"),
)

_HISTOGRAM_NAME_SEPARATORS = re.compile(r"[ (,)]+")


def extract_percentile(query: str) -> str:
    """Return the percentile label ("95th") a quantile query refers to, or ""."""
    for needle, label in _PERCENTILES:
        if needle in query:
            return label
    return ""


def extract_metric_name_from_histogram_query(query: str) -> str:
    """
    Extract the histogram base metric name from a bucket query.

    ``histogram_quantile(0.95, rate(http_duration_bucket[5m]))`` gives
    ``http_duration``. Returns "" when the query has no ``_bucket`` term.
    """
    index = query.find("_bucket")
    if index == -1:
        return ""

    words = [w for w in _HISTOGRAM_NAME_SEPARATORS.split(query[:index]) if w]
    if not words:
        return ""

    return words[-1].strip("()[], ")


class QueryEnhancer:
    """Applies heuristic improvements to generated query suggestions."""

    def enhance(self, info: MetricInfo, suggestions: Sequence[QuerySuggestion]) -> List[QuerySuggestion]:
        enhanced = [self.enhance_suggestion(info, s) for s in suggestions]
        enhanced.extend(self.contextual_queries(info))
        return enhanced

    def enhance_suggestion(self, info: MetricInfo, suggestion: QuerySuggestion) -> QuerySuggestion:
        return suggestion.model_copy(
            update={
                "description": self.enhance_description(info, suggestion),
                "query": self.optimize_query(info, suggestion.query),
                "visualization_type": self.suggest_visualization_type(info, suggestion),
            }
        )

    def enhance_description(self, info: MetricInfo, suggestion: QuerySuggestion) -> str:
        name = info.name
        query = suggestion.query
        description = suggestion.description

        if "http" in name and "rate(" in query:
            return f"HTTP {description.lower()}"

        if ("error" in name or "fail" in name) and "rate(" in query:
            return f"Error {description.lower()}"

        if "memory" in name or "cpu" in name:
            return f"Resource Usage: {description}"

        if "latency" in name or "duration" in name:
            return f"Performance: {description}"

        if "histogram_quantile" in query:
            percentile = extract_percentile(query)
            if percentile:
                return f"{percentile} percentile ({percentile} of requests are faster)"

        if "increase(" in query:
            return f"Total {description.lower()}"

        return description

    def optimize_query(self, info: MetricInfo, query: str) -> str:
        optimized = query

        # High-frequency series get a shorter window for fresher data.
        if "rate(" in query and "[5m]" in query:
            if "request" in info.name or "http" in info.name:
                optimized = optimized.replace("[5m]", "[2m]")

        if "histogram_quantile" in query and "sum(rate(" not in query and "sum by" not in query:
            optimized = self._aggregate_buckets(optimized)

        return optimized

    def _aggregate_buckets(self, query: str) -> str:
        """Wrap the bucket rate in sum(...) by (le); untouched if the shape differs."""
        base = extract_metric_name_from_histogram_query(query)
        if not base:
            return query

        rewritten = query.replace(f"rate({base}_bucket[", f"sum(rate({base}_bucket[")
        if rewritten == query or rewritten.count("sum(") != 1:
            logger.debug(f"Skipping bucket aggregation for {query}")
            return query

        return rewritten.replace("]))", "])) by (le))")

    def suggest_visualization_type(self, info: MetricInfo, suggestion: QuerySuggestion) -> str:
        query = suggestion.query

        if "histogram_quantile" in query:
            return "timeseries"

        if "avg(" in query and "over_time" not in query:
            return "stat"

        if "max(" in query or "min(" in query:
            return "stat"

        if "ratio" in info.name or "percent" in info.name:
            return "gauge"

        return suggestion.visualization_type

    def contextual_queries(self, info: MetricInfo) -> List[QuerySuggestion]:
        name = info.name
        contextual: List[QuerySuggestion] = []

        # SLI ratios for request counters
        if ("http_request" in name or "request" in name) and info.type == MetricType.COUNTER:
            contextual.append(
                QuerySuggestion(
                    query=f'rate({name}{{status=~"5.."}}[5m]) / rate({name}[5m])',
                    description="Error rate (5xx responses)",
                    visualization_type="timeseries",
                    y_axis_label="error ratio",
                )
            )
            contextual.append(
                QuerySuggestion(
                    query=f'rate({name}{{status=~"2.."}}[5m]) / rate({name}[5m])',
                    description="Success rate (2xx responses)",
                    visualization_type="stat",
                    y_axis_label="success ratio",
                )
            )

        if info.type == MetricType.COUNTER and ("error" in name or "fail" in name):
            contextual.append(
                QuerySuggestion(
                    query=f"increase({name}[1h]) > 10",
                    description="High error count alert (>10/hour)",
                    visualization_type="table",
                    y_axis_label="count",
                )
            )

        if "cpu" in name and info.type == MetricType.GAUGE:
            contextual.append(
                QuerySuggestion(
                    query=f"({name} > 80)",
                    description="High CPU usage alert (>80%)",
                    visualization_type="table",
                    y_axis_label="percent",
                )
            )

        if "memory" in name and info.type == MetricType.GAUGE:
            contextual.append(
                QuerySuggestion(
                    query=f"({name} / 1024 / 1024 / 1024)",
                    description="Memory usage in GB",
                    visualization_type="timeseries",
                    y_axis_label="GB",
                )
            )

        return contextual


_default_enhancer = QueryEnhancer()


def enhance_queries(info: MetricInfo, suggestions: Sequence[QuerySuggestion]) -> List[QuerySuggestion]:
    """Enhance suggestions with the default enhancer. Never shrinks the list."""
    return _default_enhancer.enhance(info, suggestions)
