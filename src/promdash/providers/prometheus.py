"""
Prometheus provider for metric metadata and query validation.

Implements the PrometheusGateway capabilities over the Prometheus HTTP API.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from promdash.core.errors import ProviderError
from promdash.promql.classifier import infer_metric_type
from promdash.promql.models import NO_METADATA_HELP, MetricInfo, MetricType
from promdash.providers.base import Provider, ProviderHealth
from promdash.providers.registry import register_provider

DEFAULT_USER_AGENT = "promdash-provider-prometheus/0.1.0"

logger = structlog.get_logger()


class PrometheusProviderError(ProviderError):
    """Raised when Prometheus is unreachable or returns an unusable response."""


class PromQLSyntaxError(PrometheusProviderError):
    """Raised when Prometheus rejects a query."""


class PrometheusProvider(Provider):
    """Prometheus metadata, label and query-validation provider."""

    name = "prometheus"

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._base_url = url.rstrip("/")
        self._timeout = timeout
        self._user_agent = user_agent

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        return None

    async def health_check(self) -> ProviderHealth:
        """Check if Prometheus is reachable."""
        try:
            payload = await self._request("GET", "/api/v1/query", params={"query": "up"})
            self._ensure_success(payload, "query")
            return ProviderHealth(status="healthy")
        except PrometheusProviderError as exc:
            return ProviderHealth(status="unreachable", details=str(exc))

    async def fetch_metadata(self, metric_name: str) -> MetricInfo:
        """
        Fetch type and help text for a metric.

        Falls back to name-based type inference when Prometheus has no
        metadata for the metric. Label lookup failures are not fatal.

        Args:
            metric_name: Metric to look up

        Returns:
            MetricInfo for the metric

        Raises:
            PrometheusProviderError: on transport, status or decoding errors
        """
        payload = await self._request("GET", "/api/v1/metadata", params={"metric": metric_name})
        self._ensure_success(payload, "metadata")

        entries = (payload.get("data") or {}).get(metric_name) or []
        if not entries:
            inferred = infer_metric_type(metric_name)
            logger.debug("metric_metadata_missing", metric=metric_name, inferred_type=inferred.value)
            return MetricInfo(name=metric_name, type=inferred, help=NO_METADATA_HELP)

        try:
            labels = await self.fetch_labels(metric_name)
        except PrometheusProviderError as exc:
            logger.debug("metric_labels_unavailable", metric=metric_name, error=str(exc))
            labels = []

        entry = entries[0]
        return MetricInfo(
            name=metric_name,
            type=MetricType.parse(entry.get("type")),
            help=entry.get("help") or "",
            labels=labels,
        )

    async def fetch_labels(self, metric_name: str) -> list[str]:
        """List label names present on the metric's series."""
        payload = await self._request("GET", "/api/v1/labels", params={"match[]": metric_name})
        self._ensure_success(payload, "labels")
        return list(payload.get("data") or [])

    async def validate(self, query: str) -> None:
        """
        Validate a query by evaluating it at epoch time.

        Prometheus answers bad syntax with HTTP 400 and an error envelope, so
        the body is decoded regardless of status code.
        """
        payload = await self._request(
            "POST",
            "/api/v1/query",
            data={"query": query, "time": "0"},
            raise_for_status=False,
        )
        if payload.get("status") != "success":
            raise PromQLSyntaxError(
                f"query validation failed: {payload.get('error', '')} ({payload.get('errorType', '')})",
                details={"query": query},
            )

    async def list_metric_names(self) -> list[str]:
        payload = await self._request("GET", "/api/v1/label/__name__/values")
        self._ensure_success(payload, "label values")
        return sorted(payload.get("data") or [])

    async def fetch_all_metadata(self) -> dict[str, list[dict[str, Any]]]:
        payload = await self._request("GET", "/api/v1/metadata")
        self._ensure_success(payload, "metadata")
        return dict(payload.get("data") or {})

    @staticmethod
    def _ensure_success(payload: dict[str, Any], endpoint: str) -> None:
        status = payload.get("status")
        if status != "success":
            error = payload.get("error", "Unknown error")
            raise PrometheusProviderError(
                f"prometheus {endpoint} API returned non-success status: {status} ({error})"
            )

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        data: dict[str, str] | None = None,
        raise_for_status: bool = True,
    ) -> dict[str, Any]:
        """Execute HTTP request to Prometheus and decode the JSON body."""
        url = f"{self._base_url}{path}"
        headers = {"User-Agent": self._user_agent}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    data=data,
                )
                if raise_for_status:
                    resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise PrometheusProviderError(f"failed to query Prometheus {path}: {exc}") from exc

        try:
            decoded = resp.json()
        except ValueError as exc:
            raise PrometheusProviderError(f"failed to decode {path} response: {exc}") from exc

        if not isinstance(decoded, dict):
            raise PrometheusProviderError(f"failed to decode {path} response: expected a JSON object")
        return decoded


def _factory(**kwargs: Any) -> PrometheusProvider:
    return PrometheusProvider(**kwargs)


register_provider(
    PrometheusProvider.name,
    _factory,
    description="Prometheus metadata, labels and query validation",
)

__all__ = [
    "PrometheusProvider",
    "PrometheusProviderError",
    "PromQLSyntaxError",
]
