"""deploy_dashboard: push an existing dashboard JSON document to Grafana."""

from __future__ import annotations

from typing import Any, Dict

import structlog

from promdash.core.errors import ConfigurationError, ProviderError
from promdash.providers.grafana import DashboardSave
from promdash.skills.base import ToolContext, ToolInputError, optional_string, to_json
from promdash.skills.create_dashboard import DEPLOY_DISABLED_ERROR

logger = structlog.get_logger()

DEFAULT_MESSAGE = "Dashboard deployed via promdash"


class DeployDashboardTool:
    def __init__(self, ctx: ToolContext) -> None:
        self._ctx = ctx

    @property
    def name(self) -> str:
        return "deploy_dashboard"

    @property
    def description(self) -> str:
        return "Deploys a dashboard JSON to Grafana (Cloud or self-hosted)"

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "dashboard_json": {
                    "description": "The complete dashboard JSON object to deploy",
                    "type": "object",
                },
                "folder_uid": {
                    "description": "Optional folder UID where the dashboard should be deployed",
                    "type": "string",
                },
                "grafana_url": {
                    "description": "Grafana server URL (overrides default configuration if provided)",
                    "type": "string",
                },
                "message": {
                    "description": "Optional commit message describing the dashboard changes",
                    "type": "string",
                },
                "overwrite": {
                    "description": "Whether to overwrite an existing dashboard with the same UID (default true)",
                    "type": "boolean",
                },
            },
            "required": ["dashboard_json"],
        }

    async def handle(self, args: Dict[str, Any]) -> str:
        settings = self._ctx.settings
        if not settings.grafana_deploy_enabled:
            logger.warning("grafana_deploy_disabled")
            raise ConfigurationError(DEPLOY_DISABLED_ERROR)

        dashboard_json = args.get("dashboard_json")
        if not isinstance(dashboard_json, dict) or not dashboard_json:
            raise ToolInputError("dashboard_json is required and must be a valid object")

        grafana_url = self._ctx.resolve_grafana_url(args)
        if not grafana_url:
            raise ToolInputError(
                "grafana_url must be provided either as a parameter or in configuration (GRAFANA_URL)"
            )

        api_key = settings.grafana_api_key
        if not api_key:
            raise ConfigurationError("grafana API key is required - set GRAFANA_API_KEY")

        overwrite = args.get("overwrite")
        save = DashboardSave(
            dashboard=dashboard_json,
            folder_uid=optional_string(args, "folder_uid"),
            message=optional_string(args, "message", DEFAULT_MESSAGE),
            overwrite=overwrite if isinstance(overwrite, bool) else True,
        )

        logger.info(
            "deploying_dashboard",
            grafana_url=grafana_url,
            folder_uid=save.folder_uid,
            overwrite=save.overwrite,
        )

        try:
            resp = await self._ctx.grafana(grafana_url, api_key).create_dashboard(save)
        except ProviderError as exc:
            raise ProviderError(f"failed to deploy dashboard to Grafana: {exc}") from exc

        logger.info(
            "dashboard_deployed",
            grafana_url=grafana_url,
            dashboard_uid=resp.uid,
            dashboard_id=resp.id,
            dashboard_url=resp.url,
        )

        return to_json(
            {
                "status": "deployed",
                "grafana_url": grafana_url,
                "dashboard": {
                    "id": resp.id,
                    "uid": resp.uid,
                    "url": resp.url,
                    "version": resp.version,
                    "slug": resp.slug,
                },
                "message": save.message,
            }
        )
