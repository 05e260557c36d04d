"""
PromQL service: the engine plus the Prometheus gateway behind one facade.

Tools talk to this class rather than to the engine modules and providers
directly, so tests can swap the gateway factory for a fake.
"""

from __future__ import annotations

import re
from typing import Callable, List, Sequence

import structlog

from promdash.promql.classifier import infer_metric_type
from promdash.promql.enhancer import enhance_queries
from promdash.promql.generator import generate_queries
from promdash.promql.models import NO_METADATA_HELP, MetricInfo, MetricType, QuerySuggestion
from promdash.promql.selector import get_best_query
from promdash.providers import create_provider
from promdash.providers.base import PrometheusGateway

logger = structlog.get_logger()

GatewayFactory = Callable[[str], PrometheusGateway]


class PromQLService:
    """Builds, enhances, validates and selects PromQL queries."""

    def __init__(
        self,
        gateway_factory: GatewayFactory | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        self._timeout = timeout
        self._gateway_factory = gateway_factory or self._default_gateway

    def _default_gateway(self, prometheus_url: str) -> PrometheusGateway:
        return create_provider("prometheus", url=prometheus_url, timeout=self._timeout)

    def gateway(self, prometheus_url: str) -> PrometheusGateway:
        return self._gateway_factory(prometheus_url)

    async def get_metric_metadata(self, prometheus_url: str, metric_name: str) -> MetricInfo:
        logger.debug("fetching_metric_metadata", metric=metric_name, prometheus_url=prometheus_url)
        return await self.gateway(prometheus_url).fetch_metadata(metric_name)

    def generate_queries(self, info: MetricInfo) -> List[QuerySuggestion]:
        logger.debug("generating_queries", metric=info.name, type=info.type.value)
        return generate_queries(info)

    def enhance_queries(self, info: MetricInfo, suggestions: Sequence[QuerySuggestion]) -> List[QuerySuggestion]:
        logger.debug("enhancing_queries", metric=info.name, suggestion_count=len(suggestions))
        return enhance_queries(info, suggestions)

    async def validate_query(self, prometheus_url: str, query: str) -> None:
        logger.debug("validating_query", query=query, prometheus_url=prometheus_url)
        await self.gateway(prometheus_url).validate(query)

    def get_best_query(self, suggestions: Sequence[QuerySuggestion]) -> QuerySuggestion:
        logger.debug("selecting_best_query", suggestion_count=len(suggestions))
        return get_best_query(suggestions)

    async def discover_metrics(
        self,
        prometheus_url: str,
        name_pattern: str | re.Pattern[str] | None = None,
        metric_type: MetricType | None = None,
    ) -> List[MetricInfo]:
        """
        List metrics known to Prometheus, optionally filtered.

        Args:
            prometheus_url: Prometheus server URL
            name_pattern: Regex searched within each metric name
            metric_type: Only keep metrics of this type

        Returns:
            MetricInfo per matching metric, sorted by name
        """
        gateway = self.gateway(prometheus_url)
        pattern = re.compile(name_pattern) if isinstance(name_pattern, str) and name_pattern else name_pattern

        names = await gateway.list_metric_names()
        if pattern is not None:
            names = [n for n in names if pattern.search(n)]

        metadata = await gateway.fetch_all_metadata() if names else {}

        metrics: List[MetricInfo] = []
        for name in names:
            entries = metadata.get(name) or []
            if entries:
                info = MetricInfo(
                    name=name,
                    type=MetricType.parse(entries[0].get("type")),
                    help=entries[0].get("help") or "",
                )
            else:
                info = MetricInfo(name=name, type=infer_metric_type(name), help=NO_METADATA_HELP)

            if metric_type is not None and info.type != metric_type:
                continue
            metrics.append(info)

        logger.info("discovered_metrics", prometheus_url=prometheus_url, total=len(metrics))
        return metrics
