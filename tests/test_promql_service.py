"""Tests for PromQLService with an in-memory Prometheus gateway."""

import re

import pytest
from promdash.promql.models import MetricInfo, MetricType
from promdash.promql.service import PromQLService
from promdash.providers.prometheus import PrometheusProvider, PrometheusProviderError, PromQLSyntaxError


@pytest.mark.asyncio
async def test_get_metric_metadata_uses_gateway(service, fake_prometheus):
    fake_prometheus.metadata["http_requests_total"] = MetricInfo(
        name="http_requests_total", type=MetricType.COUNTER, help="Total requests"
    )

    info = await service.get_metric_metadata("http://prom:9090", "http_requests_total")

    assert info.type == MetricType.COUNTER
    assert info.help == "Total requests"


@pytest.mark.asyncio
async def test_validate_query_propagates_rejection(service, fake_prometheus):
    fake_prometheus.invalid_queries.add("rate(")

    await service.validate_query("http://prom:9090", "up")
    with pytest.raises(PromQLSyntaxError):
        await service.validate_query("http://prom:9090", "rate(")

    assert fake_prometheus.validated == ["up", "rate("]


def test_generate_enhance_select(service):
    info = MetricInfo(name="http_requests_total", type=MetricType.COUNTER)

    suggestions = service.generate_queries(info)
    enhanced = service.enhance_queries(info, suggestions)
    best = service.get_best_query(enhanced)

    assert best.query == "rate(http_requests_total[2m])"
    assert best.description == "HTTP rate per second over 5 minutes"


def test_gateway_factory_receives_url():
    seen = []
    service = PromQLService(lambda url: seen.append(url) or object())

    service.gateway("http://prom:9090")

    assert seen == ["http://prom:9090"]


def test_default_gateway_is_prometheus_provider():
    gateway = PromQLService(timeout=5.0).gateway("http://prom:9090/")

    assert isinstance(gateway, PrometheusProvider)
    assert gateway.base_url == "http://prom:9090"


class TestDiscoverMetrics:
    @pytest.fixture(autouse=True)
    def _metrics(self, fake_prometheus):
        fake_prometheus.names = ["up", "http_requests_total", "queue_size", "rpc_duration_seconds"]
        fake_prometheus.all_metadata = {
            "http_requests_total": [{"type": "counter", "help": "Total requests", "unit": ""}],
            "rpc_duration_seconds": [{"type": "summary", "help": "RPC latency", "unit": ""}],
        }

    @pytest.mark.asyncio
    async def test_lists_all_sorted(self, service):
        metrics = await service.discover_metrics("http://prom:9090")

        assert [m.name for m in metrics] == ["http_requests_total", "queue_size", "rpc_duration_seconds", "up"]
        assert metrics[0].type == MetricType.COUNTER
        assert metrics[0].help == "Total requests"
        assert metrics[1].type == MetricType.GAUGE
        assert metrics[1].help == "No metadata available"
        assert metrics[2].type == MetricType.SUMMARY
        assert metrics[3].type == MetricType.UNKNOWN

    @pytest.mark.asyncio
    async def test_name_pattern_is_searched(self, service):
        metrics = await service.discover_metrics("http://prom:9090", name_pattern="req|queue")
        assert [m.name for m in metrics] == ["http_requests_total", "queue_size"]

    @pytest.mark.asyncio
    async def test_compiled_pattern(self, service):
        metrics = await service.discover_metrics("http://prom:9090", name_pattern=re.compile(r"^up$"))
        assert [m.name for m in metrics] == ["up"]

    @pytest.mark.asyncio
    async def test_type_filter(self, service):
        metrics = await service.discover_metrics("http://prom:9090", metric_type=MetricType.SUMMARY)
        assert [m.name for m in metrics] == ["rpc_duration_seconds"]

    @pytest.mark.asyncio
    async def test_metadata_skipped_when_nothing_matches(self, service, fake_prometheus):
        metrics = await service.discover_metrics("http://prom:9090", name_pattern="^nothing")

        assert metrics == []
        assert fake_prometheus.metadata_calls == 0

    @pytest.mark.asyncio
    async def test_listing_errors_propagate(self, service, fake_prometheus):
        fake_prometheus.fail_listing = PrometheusProviderError("boom")

        with pytest.raises(PrometheusProviderError, match="boom"):
            await service.discover_metrics("http://prom:9090")
