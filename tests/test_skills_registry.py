import json

import pytest
from promdash.providers.grafana import GrafanaProvider
from promdash.skills import Tool, ToolContext, ToolInputError, build_tools


def test_build_tools_registers_all(tool_ctx):
    registry = build_tools(ctx=tool_ctx)

    assert registry.list() == [
        "generate_promql_queries",
        "validate_promql_query",
        "discover_metrics",
        "create_dashboard",
        "deploy_dashboard",
    ]
    for name in registry.list():
        assert isinstance(registry.get(name), Tool)


def test_describe_has_schemas(tool_ctx):
    described = {d["name"]: d for d in build_tools(ctx=tool_ctx).describe()}

    assert described["create_dashboard"]["parameters"]["required"] == ["dashboard_title"]
    assert described["deploy_dashboard"]["parameters"]["required"] == ["dashboard_json"]
    assert described["discover_metrics"]["parameters"]["properties"]["metric_type"]["enum"] == [
        "counter",
        "gauge",
        "histogram",
        "summary",
    ]


@pytest.mark.asyncio
async def test_call_dispatches(tool_ctx):
    result = await build_tools(ctx=tool_ctx).call(
        "validate_promql_query", {"prometheus_url": "http://prom:9090", "query": "up"}
    )
    assert json.loads(result)["valid"] is True


@pytest.mark.asyncio
async def test_unknown_tool(tool_ctx):
    with pytest.raises(ToolInputError, match="unknown tool: nope"):
        await build_tools(ctx=tool_ctx).call("nope", {})


def test_context_builds_grafana_provider_from_settings(settings, service):
    ctx = ToolContext(settings=settings.model_copy(update={"grafana_org_id": 3}), service=service)

    grafana = ctx.grafana("http://grafana:3000/", "key")

    assert isinstance(grafana, GrafanaProvider)
    assert grafana.base_url == "http://grafana:3000"


def test_resolve_grafana_url(settings, service):
    ctx = ToolContext(settings=settings.model_copy(update={"grafana_url": "http://conf:3000"}), service=service)

    assert ctx.resolve_grafana_url({}) == "http://conf:3000"
    assert ctx.resolve_grafana_url({"grafana_url": ""}) == "http://conf:3000"
    assert ctx.resolve_grafana_url({"grafana_url": "http://arg:3000"}) == "http://arg:3000"


def test_from_settings_creates_service(settings):
    ctx = ToolContext.from_settings(settings)
    assert ctx.service is not None
    assert ctx.grafana_factory is None
