"""
promdash command line.

Every subcommand maps onto one of the agent tools so the CLI and agents
share the same validation and output format.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple

from promdash.cli import ux
from promdash.config.settings import Settings, get_settings
from promdash.core.errors import (
    ExitCode,
    PromdashError,
    ValidationError,
    format_error_message,
    main_with_error_handling,
)
from promdash.logging import bind_context, configure_logging
from promdash.skills import build_tools


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promdash",
        description="PromQL query suggestions and Grafana dashboards from Prometheus metrics",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command")

    gen = subparsers.add_parser("generate-queries", help="Generate PromQL suggestions for metrics")
    gen.add_argument("metric_names", nargs="+", help="Metric names")
    gen.add_argument("--prometheus-url", help="Prometheus URL (default: PROMETHEUS_URL)")

    val = subparsers.add_parser("validate-query", help="Validate a PromQL query against Prometheus")
    val.add_argument("query", help="PromQL query")
    val.add_argument("--prometheus-url", help="Prometheus URL (default: PROMETHEUS_URL)")

    disc = subparsers.add_parser("discover", help="Discover metrics available in Prometheus")
    disc.add_argument("--prometheus-url", help="Prometheus URL (default: PROMETHEUS_URL)")
    disc.add_argument("--name-pattern", help="Regex filter on metric names")
    disc.add_argument(
        "--metric-type",
        choices=["counter", "gauge", "histogram", "summary"],
        help="Only list metrics of this type",
    )

    create = subparsers.add_parser("create-dashboard", help="Build a Grafana dashboard")
    create.add_argument("title", help="Dashboard title")
    create.add_argument("--metric", dest="metric_names", action="append", default=[], help="Metric to chart (repeatable)")
    create.add_argument("--panels-file", help="JSON file with a list of panel definitions")
    create.add_argument("--prometheus-url", help="Prometheus URL (default: PROMETHEUS_URL)")
    create.add_argument("--description", help="Dashboard description")
    create.add_argument("--tag", dest="tags", action="append", default=[], help="Dashboard tag (repeatable)")
    create.add_argument("--refresh", dest="refresh_interval", help="Auto-refresh interval, e.g. 1m")
    create.add_argument("--deploy", action="store_true", help="Deploy to Grafana")
    create.add_argument("--grafana-url", help="Grafana URL (default: GRAFANA_URL)")
    create.add_argument("-o", "--output", help="Write result JSON to this file")

    deploy = subparsers.add_parser("deploy-dashboard", help="Deploy a dashboard JSON file to Grafana")
    deploy.add_argument("dashboard_file", help="Dashboard JSON (bare dashboard or save envelope)")
    deploy.add_argument("--grafana-url", help="Grafana URL (default: GRAFANA_URL)")
    deploy.add_argument("--folder-uid", help="Target folder UID")
    deploy.add_argument("--message", help="Version message")
    deploy.add_argument("--no-overwrite", action="store_true", help="Fail if the dashboard already exists")

    subparsers.add_parser("list-tools", help="List agent tools and their parameters")

    return parser


def _load_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text())
    except (OSError, ValueError) as exc:
        raise ValidationError(f"could not read JSON from {path}: {exc}") from exc


def _prometheus_url(ns: argparse.Namespace, settings: Settings) -> str:
    return ns.prometheus_url or settings.prometheus_url or ""


def tool_call(ns: argparse.Namespace, settings: Settings) -> Tuple[str, Dict[str, Any]]:
    """Translate parsed arguments into a tool name and its JSON arguments."""
    if ns.command == "generate-queries":
        return "generate_promql_queries", {
            "prometheus_url": _prometheus_url(ns, settings),
            "metric_names": list(ns.metric_names),
        }

    if ns.command == "validate-query":
        return "validate_promql_query", {
            "prometheus_url": _prometheus_url(ns, settings),
            "query": ns.query,
        }

    if ns.command == "discover":
        args: Dict[str, Any] = {"prometheus_url": _prometheus_url(ns, settings)}
        if ns.name_pattern:
            args["name_pattern"] = ns.name_pattern
        if ns.metric_type:
            args["metric_type"] = ns.metric_type
        return "discover_metrics", args

    if ns.command == "create-dashboard":
        args = {"dashboard_title": ns.title, "deploy": ns.deploy, "tags": list(ns.tags)}
        if ns.metric_names:
            args["metric_names"] = list(ns.metric_names)
            args["prometheus_url"] = _prometheus_url(ns, settings)
        if ns.panels_file:
            args["panels"] = _load_json(ns.panels_file)
        for key in ("description", "refresh_interval", "grafana_url"):
            value = getattr(ns, key)
            if value:
                args[key] = value
        return "create_dashboard", args

    if ns.command == "deploy-dashboard":
        document = _load_json(ns.dashboard_file)
        if isinstance(document, dict) and isinstance(document.get("dashboard"), dict):
            document = document["dashboard"]
        args = {"dashboard_json": document, "overwrite": not ns.no_overwrite}
        for key in ("grafana_url", "folder_uid", "message"):
            value = getattr(ns, key)
            if value:
                args[key] = value
        return "deploy_dashboard", args

    raise ValidationError(f"unknown command: {ns.command}")


@main_with_error_handling()
def run(ns: argparse.Namespace, settings: Settings) -> int:
    registry = build_tools(settings)

    if ns.command == "list-tools":
        ux.print_json(json.dumps(registry.describe(), indent=2))
        return ExitCode.SUCCESS

    log = bind_context(command=ns.command)
    try:
        name, args = tool_call(ns, settings)
        log.debug("calling_tool", tool=name)
        result = asyncio.run(registry.call(name, args))
    except PromdashError as exc:
        ux.error(format_error_message(exc))
        raise

    output = getattr(ns, "output", None)
    if output:
        Path(output).write_text(result)
        ux.success(f"Wrote {output}")
    else:
        ux.print_json(result)
    return ExitCode.SUCCESS


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    ns = parser.parse_args(argv)
    if not ns.command:
        parser.print_help()
        sys.exit(ExitCode.VALIDATION_ERROR)

    settings = get_settings()
    configure_logging(ns.log_level or settings.log_level, settings.log_format)
    sys.exit(run(ns, settings))


if __name__ == "__main__":  # pragma: no cover
    main()
