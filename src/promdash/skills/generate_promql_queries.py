"""generate_promql_queries: query suggestions for a batch of metric names."""

from __future__ import annotations

from typing import Any, Dict, List

import structlog

from promdash.core.errors import ProviderError
from promdash.skills.base import ToolContext, ToolInputError, require_string, to_json

logger = structlog.get_logger()

NO_SUGGESTIONS_ERROR = "no query suggestions could be generated"


def parse_metric_names(args: Dict[str, Any]) -> List[str]:
    """Validate ``metric_names``; non-string entries are dropped."""
    if "metric_names" not in args:
        raise ToolInputError("metric_names is required")

    raw = args["metric_names"]
    if not isinstance(raw, list):
        raise ToolInputError("metric_names must be an array")
    if not raw:
        raise ToolInputError("metric_names cannot be empty")

    return [name for name in raw if isinstance(name, str)]


class GeneratePromqlQueriesTool:
    """Fetches metadata for each metric and returns generated query suggestions."""

    def __init__(self, ctx: ToolContext) -> None:
        self._ctx = ctx

    @property
    def name(self) -> str:
        return "generate_promql_queries"

    @property
    def description(self) -> str:
        return "Generates PromQL query suggestions for given metric names by querying Prometheus metadata"

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "metric_names": {
                    "description": "Array of metric names to generate queries for",
                    "items": {"type": "string"},
                    "type": "array",
                },
                "prometheus_url": {
                    "description": "Prometheus server URL for querying metric metadata",
                    "type": "string",
                },
            },
            "required": ["prometheus_url", "metric_names"],
        }

    async def handle(self, args: Dict[str, Any]) -> str:
        logger.info("generating_promql_queries")

        prometheus_url = require_string(args, "prometheus_url")
        metric_names = parse_metric_names(args)

        results = []
        for metric_name in metric_names:
            results.append(await self._result_for(prometheus_url, metric_name))

        return to_json({"prometheus_url": prometheus_url, "results": results})

    async def _result_for(self, prometheus_url: str, metric_name: str) -> Dict[str, Any]:
        service = self._ctx.service
        result: Dict[str, Any] = {
            "metric_name": metric_name,
            "metric_type": "",
            "metric_help": "",
            "suggestions": [],
        }

        try:
            info = await service.get_metric_metadata(prometheus_url, metric_name)
        except ProviderError as exc:
            logger.warning("metric_metadata_fetch_failed", metric=metric_name, error=str(exc))
            result["error"] = f"failed to get metadata: {exc}"
            return result

        result["metric_type"] = info.type.value
        result["metric_help"] = info.help
        if info.labels:
            result["labels"] = list(info.labels)

        suggestions = service.generate_queries(info)
        if not suggestions:
            logger.warning("no_suggestions_generated", metric=metric_name)
            result["error"] = NO_SUGGESTIONS_ERROR
            return result

        result["suggestions"] = [s.model_dump() for s in suggestions]
        logger.info("generated_queries_for_metric", metric=metric_name, suggestion_count=len(suggestions))
        return result
