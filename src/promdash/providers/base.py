from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Protocol

if TYPE_CHECKING:
    from promdash.promql.models import MetricInfo
    from promdash.providers.grafana import DashboardResponse, DashboardSave


@dataclass(frozen=True)
class ProviderHealth:
    status: Literal["healthy", "degraded", "unreachable"]
    details: str | None = None


class Provider(Protocol):
    """Minimal interface shared by all providers."""

    name: str

    async def health_check(self) -> ProviderHealth:
        ...

    async def aclose(self) -> None:
        ...


class PrometheusGateway(Protocol):
    """Capabilities the query engine needs from a Prometheus server."""

    async def fetch_metadata(self, metric_name: str) -> MetricInfo:
        """Return metric info; infers the type by name when metadata is missing."""
        ...

    async def fetch_labels(self, metric_name: str) -> list[str]:
        ...

    async def validate(self, query: str) -> None:
        """Raise PromQLSyntaxError if Prometheus rejects the query."""
        ...

    async def list_metric_names(self) -> list[str]:
        ...

    async def fetch_all_metadata(self) -> dict[str, list[dict[str, Any]]]:
        ...


class GrafanaGateway(Protocol):
    """Dashboard operations against a Grafana instance."""

    async def create_dashboard(self, dashboard: DashboardSave) -> DashboardResponse:
        ...

    async def update_dashboard(self, dashboard: DashboardSave) -> DashboardResponse:
        ...

    async def get_dashboard(self, uid: str) -> DashboardSave:
        ...

    async def delete_dashboard(self, uid: str) -> None:
        ...
