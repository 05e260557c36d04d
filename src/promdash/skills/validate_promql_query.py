"""validate_promql_query: ask Prometheus whether it accepts a query."""

from __future__ import annotations

from typing import Any, Dict

import structlog

from promdash.core.errors import ProviderError
from promdash.skills.base import ToolContext, require_string, to_json

logger = structlog.get_logger()


class ValidatePromqlQueryTool:
    def __init__(self, ctx: ToolContext) -> None:
        self._ctx = ctx

    @property
    def name(self) -> str:
        return "validate_promql_query"

    @property
    def description(self) -> str:
        return "Validates a PromQL query against a Prometheus server"

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "prometheus_url": {
                    "description": "Prometheus server URL to validate against",
                    "type": "string",
                },
                "query": {
                    "description": "PromQL query to validate",
                    "type": "string",
                },
            },
            "required": ["prometheus_url", "query"],
        }

    async def handle(self, args: Dict[str, Any]) -> str:
        prometheus_url = require_string(args, "prometheus_url")
        query = require_string(args, "query")

        response: Dict[str, Any] = {
            "prometheus_url": prometheus_url,
            "query": query,
            "valid": False,
        }

        try:
            await self._ctx.service.validate_query(prometheus_url, query)
        except ProviderError as exc:
            logger.warning("query_validation_failed", query=query, error=str(exc))
            response["error"] = str(exc)
        else:
            logger.info("query_validation_succeeded", query=query)
            response["valid"] = True

        return to_json(response)
