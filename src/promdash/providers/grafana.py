from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from promdash.core.errors import ProviderError
from promdash.providers.base import Provider, ProviderHealth
from promdash.providers.registry import register_provider

DEFAULT_USER_AGENT = "promdash-provider-grafana/0.1.0"

logger = structlog.get_logger()


class GrafanaProviderError(ProviderError):
    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class DashboardSave(BaseModel):
    """Body of POST /api/dashboards/db."""

    model_config = ConfigDict(populate_by_name=True)

    dashboard: dict[str, Any]
    folder_uid: str = Field("", alias="folderUid")
    message: str = ""
    overwrite: bool = False

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class DashboardResponse(BaseModel):
    """Grafana's answer to a dashboard save."""

    model_config = ConfigDict(extra="ignore")

    id: int = 0
    uid: str = ""
    url: str = ""
    status: str = ""
    version: int = 0
    slug: str = ""


class GrafanaProvider(Provider):
    name = "grafana"

    def __init__(
        self,
        url: str,
        token: str | None,
        *,
        timeout: float = 30.0,
        org_id: int | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._base_url = url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._org_id = org_id
        self._user_agent = user_agent

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:  # for symmetry with other providers
        return None

    async def health_check(self) -> ProviderHealth:
        try:
            await self._request("GET", "/api/health")
            return ProviderHealth(status="healthy")
        except GrafanaProviderError as exc:
            return ProviderHealth(status="unreachable", details=str(exc))

    async def create_dashboard(self, dashboard: DashboardSave) -> DashboardResponse:
        data = await self._request("POST", "/api/dashboards/db", json=dashboard.to_payload())
        try:
            resp = DashboardResponse.model_validate(data)
        except ValidationError as exc:
            raise GrafanaProviderError(f"failed to decode grafana response: {exc}") from exc
        logger.info("dashboard_saved", id=resp.id, uid=resp.uid, url=resp.url)
        return resp

    async def update_dashboard(self, dashboard: DashboardSave) -> DashboardResponse:
        return await self.create_dashboard(dashboard.model_copy(update={"overwrite": True}))

    async def get_dashboard(self, uid: str) -> DashboardSave:
        try:
            data = await self._request("GET", f"/api/dashboards/uid/{uid}")
        except GrafanaProviderError as exc:
            if exc.status_code == 404:
                raise GrafanaProviderError("dashboard not found", {"uid": uid}, status_code=404) from exc
            raise
        meta = data.get("meta") or {}
        return DashboardSave(
            dashboard=data.get("dashboard") or {},
            folder_uid=meta.get("folderUid") or "",
        )

    async def delete_dashboard(self, uid: str) -> None:
        await self._request("DELETE", f"/api/dashboards/uid/{uid}")
        logger.info("dashboard_deleted", uid=uid)

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        headers = kwargs.pop("headers", {}) or {}
        if self._token:
            headers.setdefault("Authorization", f"Bearer {self._token}")
        if self._org_id is not None:
            headers.setdefault("X-Grafana-Org-Id", str(self._org_id))
        headers.setdefault("Content-Type", "application/json")
        headers.setdefault("User-Agent", self._user_agent)

        def _call() -> dict[str, Any]:
            try:
                with httpx.Client(timeout=self._timeout) as client:
                    resp = client.request(method, url, headers=headers, **kwargs)
            except httpx.HTTPError as exc:
                raise GrafanaProviderError(f"failed to reach grafana at {url}: {exc}") from exc

            if resp.status_code != httpx.codes.OK:
                raise GrafanaProviderError(
                    f"grafana returned status {resp.status_code}",
                    {"path": path},
                    status_code=resp.status_code,
                )
            if not resp.content:
                return {}
            try:
                decoded = resp.json()
            except ValueError as exc:
                raise GrafanaProviderError(f"failed to decode grafana response: {exc}") from exc
            if not isinstance(decoded, dict):
                raise GrafanaProviderError("failed to decode grafana response: expected a JSON object", {"path": path})
            return decoded

        return await asyncio.to_thread(_call)


def _factory(**kwargs: Any) -> GrafanaProvider:
    return GrafanaProvider(**kwargs)


register_provider(
    GrafanaProvider.name,
    _factory,
    description="Grafana provider (dashboards)",
)

__all__ = [
    "DashboardResponse",
    "DashboardSave",
    "GrafanaProvider",
    "GrafanaProviderError",
]
