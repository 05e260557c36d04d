"""
Agent-exposed tools.

Each tool validates its JSON arguments, calls into the PromQL engine or the
Grafana provider and returns an indented JSON document. Request-level
problems raise ``ToolInputError``/``ConfigurationError``; per-metric
problems are reported inside the result.
"""

from __future__ import annotations

from promdash.config.settings import Settings, get_settings
from promdash.skills.base import Tool, ToolContext, ToolInputError, ToolRegistry
from promdash.skills.create_dashboard import CreateDashboardTool
from promdash.skills.deploy_dashboard import DeployDashboardTool
from promdash.skills.discover_metrics import DiscoverMetricsTool
from promdash.skills.generate_promql_queries import GeneratePromqlQueriesTool
from promdash.skills.validate_promql_query import ValidatePromqlQueryTool


def build_tools(settings: Settings | None = None, ctx: ToolContext | None = None) -> ToolRegistry:
    """Register every built-in tool against a shared context."""
    if ctx is None:
        ctx = ToolContext.from_settings(settings or get_settings())

    registry = ToolRegistry()
    for tool_cls in (
        GeneratePromqlQueriesTool,
        ValidatePromqlQueryTool,
        DiscoverMetricsTool,
        CreateDashboardTool,
        DeployDashboardTool,
    ):
        registry.register(tool_cls(ctx))
    return registry


__all__ = [
    "CreateDashboardTool",
    "DeployDashboardTool",
    "DiscoverMetricsTool",
    "GeneratePromqlQueriesTool",
    "Tool",
    "ToolContext",
    "ToolInputError",
    "ToolRegistry",
    "ValidatePromqlQueryTool",
    "build_tools",
]
