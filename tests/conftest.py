"""Root test configuration."""

import logging
from typing import Any

import pytest
import structlog
from promdash.config.settings import Settings
from promdash.promql.models import MetricInfo
from promdash.promql.service import PromQLService
from promdash.providers.grafana import DashboardResponse
from promdash.providers.prometheus import PromQLSyntaxError
from promdash.skills.base import ToolContext


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class FakePrometheus:
    """In-memory stand-in for PrometheusProvider."""

    def __init__(
        self,
        metadata: dict[str, MetricInfo | Exception] | None = None,
        invalid_queries: set[str] | None = None,
        names: list[str] | None = None,
        all_metadata: dict[str, list[dict[str, Any]]] | None = None,
    ) -> None:
        self.metadata = metadata or {}
        self.invalid_queries = invalid_queries or set()
        self.names = names or []
        self.all_metadata = all_metadata or {}
        self.validated: list[str] = []
        self.metadata_calls = 0
        self.fail_listing: Exception | None = None

    async def fetch_metadata(self, metric_name: str) -> MetricInfo:
        value = self.metadata.get(metric_name)
        if isinstance(value, Exception):
            raise value
        if value is None:
            return MetricInfo(name=metric_name, help="No metadata available")
        return value

    async def fetch_labels(self, metric_name: str) -> list[str]:
        info = self.metadata.get(metric_name)
        return list(info.labels) if isinstance(info, MetricInfo) else []

    async def validate(self, query: str) -> None:
        self.validated.append(query)
        if query in self.invalid_queries:
            raise PromQLSyntaxError("query validation failed: parse error (bad_data)")

    async def list_metric_names(self) -> list[str]:
        if self.fail_listing is not None:
            raise self.fail_listing
        return sorted(self.names)

    async def fetch_all_metadata(self) -> dict[str, list[dict[str, Any]]]:
        self.metadata_calls += 1
        return self.all_metadata


class FakeGrafana:
    """Records dashboard saves instead of calling Grafana."""

    def __init__(self, response: DashboardResponse | None = None, error: Exception | None = None) -> None:
        self.response = response or DashboardResponse(
            id=42, uid="abc123", url="/d/abc123/test", status="success", version=1, slug="test"
        )
        self.error = error
        self.saved = []
        self.created_with: list[tuple[str, str | None]] = []

    def __call__(self, url: str, api_key: str | None) -> "FakeGrafana":
        self.created_with.append((url, api_key))
        return self

    async def create_dashboard(self, dashboard):
        if self.error is not None:
            raise self.error
        self.saved.append(dashboard)
        return self.response


@pytest.fixture
def fake_prometheus():
    return FakePrometheus()


@pytest.fixture
def service(fake_prometheus):
    return PromQLService(lambda url: fake_prometheus)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        prometheus_url="http://prometheus:9090",
        grafana_url=None,
        grafana_api_key=None,
        grafana_deploy_enabled=False,
    )


@pytest.fixture
def fake_grafana():
    return FakeGrafana()


@pytest.fixture
def tool_ctx(settings, service, fake_grafana):
    return ToolContext(settings=settings, service=service, grafana_factory=fake_grafana)
