"""
Metric type inference from naming conventions.

Used when Prometheus has no metadata for a metric. Matching is plain,
case-sensitive substring/suffix matching and the first matching rule wins,
so a name like ``request_count_bucket`` is a counter, not a histogram.
"""

import logging

from .models import MetricType

logger = logging.getLogger(__name__)

COUNTER_SUFFIXES = ("_total",)
COUNTER_SUBSTRINGS = ("_count", "requests", "errors")
HISTOGRAM_SUBSTRINGS = ("_bucket", "_duration", "_latency")
GAUGE_SUBSTRINGS = ("size", "usage", "memory", "cpu")


def looks_like_counter(metric_name: str) -> bool:
    """Return True if the name follows counter naming conventions."""
    return metric_name.endswith(COUNTER_SUFFIXES) or any(
        s in metric_name for s in COUNTER_SUBSTRINGS
    )


def infer_metric_type(metric_name: str) -> MetricType:
    """Infer metric type from its name. Order of checks matters."""
    if looks_like_counter(metric_name):
        return MetricType.COUNTER

    if any(s in metric_name for s in HISTOGRAM_SUBSTRINGS):
        return MetricType.HISTOGRAM

    if any(s in metric_name for s in GAUGE_SUBSTRINGS):
        return MetricType.GAUGE

    return MetricType.UNKNOWN


class MetricTypeClassifier:
    """Infers metric types by name when metadata is unavailable."""

    def infer(self, metric_name: str) -> MetricType:
        metric_type = infer_metric_type(metric_name)
        logger.debug(f"Inferred {metric_name} as {metric_type.value}")
        return metric_type
