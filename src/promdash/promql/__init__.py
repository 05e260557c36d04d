"""
PromQL query generation engine.

Infers metric types, generates candidate queries per type, enhances them
with rule-based heuristics and selects the query to visualize. Everything
here is pure and synchronous; Prometheus access lives in
``promdash.providers`` and ``promdash.promql.service``.
"""

from .classifier import MetricTypeClassifier, infer_metric_type, looks_like_counter
from .enhancer import (
    QueryEnhancer,
    enhance_queries,
    extract_metric_name_from_histogram_query,
    extract_percentile,
)
from .generator import QueryGenerator, generate_queries
from .models import NO_METADATA_HELP, MetricInfo, MetricType, QuerySuggestion
from .selector import DEFAULT_QUERY, get_best_query

__all__ = [
    'DEFAULT_QUERY',
    'NO_METADATA_HELP',
    'MetricInfo',
    'MetricType',
    'MetricTypeClassifier',
    'QueryEnhancer',
    'QueryGenerator',
    'QuerySuggestion',
    'enhance_queries',
    'extract_metric_name_from_histogram_query',
    'extract_percentile',
    'generate_queries',
    'get_best_query',
    'infer_metric_type',
    'looks_like_counter',
]
