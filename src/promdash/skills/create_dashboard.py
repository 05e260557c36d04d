"""create_dashboard: build (and optionally deploy) a Grafana dashboard."""

from __future__ import annotations

from typing import Any, Dict

import structlog

from promdash.core.errors import ConfigurationError, ProviderError
from promdash.dashboards.builder import build_dashboard
from promdash.dashboards.panels import DashboardAssemblyError, PanelGenerator
from promdash.providers.grafana import DashboardSave
from promdash.skills.base import ToolContext, ToolInputError, optional_string, require_string, to_json

logger = structlog.get_logger()

DEPLOY_DISABLED_ERROR = (
    "grafana deployment is disabled - set GRAFANA_DEPLOY_ENABLED=true to enable dashboard deployments"
)
PANELS_REQUIRED_ERROR = (
    "panels are required - provide either 'panels' array or 'metric_names' with 'prometheus_url'"
)


class CreateDashboardTool:
    """Assembles dashboard JSON from panels or from metric names."""

    def __init__(self, ctx: ToolContext) -> None:
        self._ctx = ctx

    @property
    def name(self) -> str:
        return "create_dashboard"

    @property
    def description(self) -> str:
        return "Creates a Grafana dashboard with specified panels, queries, and configurations"

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "dashboard_title": {"description": "The title of the Grafana dashboard", "type": "string"},
                "description": {
                    "description": "Description of what the dashboard monitors or displays",
                    "type": "string",
                },
                "grafana_url": {
                    "description": "Grafana server URL (overrides default configuration if provided)",
                    "type": "string",
                },
                "prometheus_url": {
                    "description": "Prometheus server URL for querying metric metadata and generating queries",
                    "type": "string",
                },
                "metric_names": {
                    "description": "Array of metric names to create panels for with auto-generated PromQL queries",
                    "items": {"type": "string"},
                    "type": "array",
                },
                "deploy": {
                    "description": "Whether to deploy the dashboard to Grafana (requires GRAFANA_DEPLOY_ENABLED=true)",
                    "type": "boolean",
                },
                "panels": {
                    "description": "Array of panel configurations (title, type, queries, etc.)",
                    "items": {"type": "object"},
                    "type": "array",
                },
                "refresh_interval": {
                    "description": 'Auto-refresh interval (e.g., "5s", "1m", "5m")',
                    "type": "string",
                },
                "tags": {
                    "description": "Tags to categorize the dashboard",
                    "items": {"type": "string"},
                    "type": "array",
                },
                "time_range": {
                    "description": "Default time range for the dashboard (from, to)",
                    "properties": {"from": {"type": "string"}, "to": {"type": "string"}},
                    "type": "object",
                },
                "variables": {
                    "description": "Dashboard template variables for dynamic queries",
                    "items": {"type": "object"},
                    "type": "array",
                },
            },
            "required": ["dashboard_title"],
        }

    async def handle(self, args: Dict[str, Any]) -> str:
        title = require_string(args, "dashboard_title")
        deploy = args.get("deploy") is True
        settings = self._ctx.settings

        if deploy:
            if not settings.grafana_deploy_enabled:
                logger.warning("grafana_deploy_disabled")
                raise ConfigurationError(DEPLOY_DISABLED_ERROR)
            if not self._ctx.resolve_grafana_url(args):
                raise ToolInputError("deployment requested but no grafana_url provided")

        panels = args.get("panels")
        metric_names = args.get("metric_names")
        if isinstance(metric_names, list) and metric_names:
            prometheus_url = optional_string(args, "prometheus_url")
            if not prometheus_url:
                raise ToolInputError("prometheus_url is required when using metric_names")
            generator = PanelGenerator(self._ctx.service)
            try:
                panels = await generator.generate_panels(metric_names, prometheus_url)
            except DashboardAssemblyError as exc:
                raise DashboardAssemblyError(f"failed to generate panels from metrics: {exc}") from exc

        if not isinstance(panels, list) or not panels:
            raise ToolInputError(PANELS_REQUIRED_ERROR)

        payload = build_dashboard(
            title,
            panels,
            description=optional_string(args, "description") or None,
            tags=args.get("tags"),
            time_range=args.get("time_range"),
            refresh_interval=optional_string(args, "refresh_interval") or None,
            variables=args.get("variables"),
        )

        if not deploy:
            return to_json(payload)

        return to_json(await self._deploy(payload, args))

    async def _deploy(self, payload: Dict[str, Any], args: Dict[str, Any]) -> Dict[str, Any]:
        grafana_url = self._ctx.resolve_grafana_url(args)
        api_key = self._ctx.settings.grafana_api_key
        if not api_key:
            raise ConfigurationError("deployment requested but no API key configured - set GRAFANA_API_KEY")

        save = DashboardSave(
            dashboard=payload["dashboard"],
            folder_uid="",
            message="Dashboard created via promdash",
            overwrite=True,
        )

        try:
            resp = await self._ctx.grafana(grafana_url, api_key).create_dashboard(save)
        except ProviderError as exc:
            raise ProviderError(f"failed to deploy dashboard to Grafana: {exc}") from exc

        logger.info("dashboard_deployed", grafana_url=grafana_url, dashboard_uid=resp.uid, dashboard_id=resp.id)

        return {
            "status": "deployed",
            "grafana_url": grafana_url,
            "dashboard": {"id": resp.id, "uid": resp.uid, "url": resp.url},
            "dashboard_json": payload,
        }
