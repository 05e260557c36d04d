"""Tests for type-specific PromQL query generation."""

from promdash.promql.generator import QueryGenerator, generate_queries, is_groupable_label
from promdash.promql.models import MetricInfo, MetricType


def _queries(info):
    return [s.query for s in generate_queries(info)]


class TestCounterQueries:
    def test_basic_counter(self):
        suggestions = generate_queries(MetricInfo(name="http_requests_total", type=MetricType.COUNTER))

        assert [s.query for s in suggestions] == [
            "rate(http_requests_total[5m])",
            "increase(http_requests_total[1h])",
        ]
        assert suggestions[0].description == "Rate per second over 5 minutes"
        assert suggestions[0].y_axis_label == "per second"
        assert suggestions[1].description == "Total increase over 1 hour"
        assert suggestions[1].y_axis_label == "total"

    def test_counter_groups_by_labels(self):
        info = MetricInfo(
            name="http_requests_total",
            type=MetricType.COUNTER,
            labels=["__name__", "method", "__meta_x", "status"],
        )
        suggestions = generate_queries(info)

        assert len(suggestions) == 4
        assert suggestions[2].query == "sum by (method) (rate(http_requests_total[5m]))"
        assert suggestions[2].description == "Rate per second grouped by method"
        assert suggestions[3].query == "sum by (status) (rate(http_requests_total[5m]))"


class TestGaugeQueries:
    def test_gauge_without_labels(self):
        suggestions = generate_queries(MetricInfo(name="temperature", type=MetricType.GAUGE))

        assert [s.query for s in suggestions] == ["temperature", "avg_over_time(temperature[1h])"]
        assert suggestions[0].description == "Current value"
        assert suggestions[1].y_axis_label == "avg value"

    def test_gauge_with_labels(self):
        info = MetricInfo(name="temperature", type=MetricType.GAUGE, labels=["room", "__name__"])
        suggestions = generate_queries(info)

        assert [s.query for s in suggestions] == [
            "temperature",
            "avg_over_time(temperature[1h])",
            "avg(temperature)",
            "max(temperature)",
            "min(temperature)",
            "avg by (room) (temperature)",
        ]
        assert [s.visualization_type for s in suggestions[2:5]] == ["stat", "stat", "stat"]

    def test_gauge_with_only_reserved_labels(self):
        info = MetricInfo(name="temperature", type=MetricType.GAUGE, labels=["__name__"])
        assert len(generate_queries(info)) == 5


class TestHistogramQueries:
    def test_histogram_from_bucket_name(self):
        suggestions = generate_queries(MetricInfo(name="http_request_duration_seconds_bucket", type=MetricType.HISTOGRAM))

        assert [s.query for s in suggestions] == [
            "histogram_quantile(0.50, rate(http_request_duration_seconds_bucket[5m]))",
            "histogram_quantile(0.95, rate(http_request_duration_seconds_bucket[5m]))",
            "histogram_quantile(0.99, rate(http_request_duration_seconds_bucket[5m]))",
            "rate(http_request_duration_seconds_count[5m])",
            "rate(http_request_duration_seconds_sum[5m]) / rate(http_request_duration_seconds_count[5m])",
        ]
        assert suggestions[0].description == "50th percentile (median) over 5 minutes"
        assert suggestions[1].description == "95th percentile over 5 minutes"
        assert suggestions[3].y_axis_label == "requests/sec"
        assert suggestions[4].description == "Average duration"

    def test_histogram_suffixes_are_stripped(self):
        for name in ("rpc_latency", "rpc_latency_count", "rpc_latency_sum"):
            queries = _queries(MetricInfo(name=name, type=MetricType.HISTOGRAM))
            assert queries[0] == "histogram_quantile(0.50, rate(rpc_latency_bucket[5m]))"


class TestSummaryQueries:
    def test_summary(self):
        suggestions = generate_queries(MetricInfo(name="rpc_duration_seconds", type=MetricType.SUMMARY))

        assert [s.query for s in suggestions] == [
            "rate(rpc_duration_seconds_count[5m])",
            "rate(rpc_duration_seconds_sum[5m]) / rate(rpc_duration_seconds_count[5m])",
            'rpc_duration_seconds{quantile="0.5"}',
            'rpc_duration_seconds{quantile="0.9"}',
            'rpc_duration_seconds{quantile="0.95"}',
            'rpc_duration_seconds{quantile="0.99"}',
        ]
        assert suggestions[1].description == "Average value"
        assert suggestions[2].description == "0.5 quantile"

    def test_summary_strips_count_suffix(self):
        queries = _queries(MetricInfo(name="rpc_duration_seconds_count", type=MetricType.SUMMARY))
        assert queries[0] == "rate(rpc_duration_seconds_count[5m])"


class TestDefaultQueries:
    def test_unknown_type_uses_raw_and_rate(self):
        suggestions = generate_queries(MetricInfo(name="up", type=MetricType.UNKNOWN))

        assert [s.query for s in suggestions] == ["up", "rate(up[5m])"]
        assert suggestions[0].description == "Raw metric value"
        assert suggestions[1].description == "Rate of change over 5 minutes"

    def test_unknown_type_with_counter_name_uses_counter_queries(self):
        queries = _queries(MetricInfo(name="jobs_total", type=MetricType.UNKNOWN))
        assert queries == ["rate(jobs_total[5m])", "increase(jobs_total[1h])"]


def test_every_type_produces_suggestions():
    generator = QueryGenerator()
    for metric_type in MetricType:
        assert generator.generate(MetricInfo(name="some_metric", type=metric_type))


def test_is_groupable_label():
    assert is_groupable_label("job")
    assert not is_groupable_label("__name__")
    assert not is_groupable_label("__address__")
