"""Tests for the promdash command line."""

import importlib
import json

import pytest
from promdash.cli.main import build_parser, run, tool_call
from promdash.core.errors import ExitCode, ValidationError
from promdash.skills import build_tools

cli_main = importlib.import_module("promdash.cli.main")


@pytest.fixture
def parser():
    return build_parser()


@pytest.fixture
def fake_registry(monkeypatch, tool_ctx):
    monkeypatch.setattr(cli_main, "build_tools", lambda settings: build_tools(ctx=tool_ctx))


class TestToolCall:
    def test_generate_queries_uses_configured_prometheus(self, parser, settings):
        ns = parser.parse_args(["generate-queries", "up", "http_requests_total"])

        assert tool_call(ns, settings) == (
            "generate_promql_queries",
            {"prometheus_url": "http://prometheus:9090", "metric_names": ["up", "http_requests_total"]},
        )

    def test_prometheus_url_flag_wins(self, parser, settings):
        ns = parser.parse_args(["validate-query", "up", "--prometheus-url", "http://other:9090"])

        assert tool_call(ns, settings) == ("validate_promql_query", {"prometheus_url": "http://other:9090", "query": "up"})

    def test_discover_filters(self, parser, settings):
        ns = parser.parse_args(["discover", "--name-pattern", "^http_", "--metric-type", "counter"])

        name, args = tool_call(ns, settings)

        assert name == "discover_metrics"
        assert args == {"prometheus_url": "http://prometheus:9090", "name_pattern": "^http_", "metric_type": "counter"}

    def test_create_dashboard(self, parser, settings, tmp_path):
        panels_file = tmp_path / "panels.json"
        panels_file.write_text(json.dumps([{"title": "Up", "targets": [{"refId": "A", "expr": "up"}]}]))
        ns = parser.parse_args(
            [
                "create-dashboard",
                "Overview",
                "--metric",
                "up",
                "--metric",
                "queue_size",
                "--panels-file",
                str(panels_file),
                "--tag",
                "team-a",
                "--refresh",
                "1m",
            ]
        )

        name, args = tool_call(ns, settings)

        assert name == "create_dashboard"
        assert args == {
            "dashboard_title": "Overview",
            "deploy": False,
            "tags": ["team-a"],
            "metric_names": ["up", "queue_size"],
            "prometheus_url": "http://prometheus:9090",
            "panels": [{"title": "Up", "targets": [{"refId": "A", "expr": "up"}]}],
            "refresh_interval": "1m",
        }

    def test_deploy_dashboard_unwraps_envelope(self, parser, settings, tmp_path):
        path = tmp_path / "dash.json"
        path.write_text(json.dumps({"dashboard": {"title": "T"}, "folderUid": "", "overwrite": False}))
        ns = parser.parse_args(["deploy-dashboard", str(path), "--folder-uid", "f1", "--no-overwrite"])

        assert tool_call(ns, settings) == (
            "deploy_dashboard",
            {"dashboard_json": {"title": "T"}, "overwrite": False, "folder_uid": "f1"},
        )

    def test_unreadable_json(self, parser, settings, tmp_path):
        ns = parser.parse_args(["deploy-dashboard", str(tmp_path / "missing.json")])

        with pytest.raises(ValidationError, match="could not read JSON"):
            tool_call(ns, settings)


class TestRun:
    def test_list_tools(self, parser, settings, fake_registry, capsys):
        code = run(parser.parse_args(["list-tools"]), settings)

        assert code == ExitCode.SUCCESS
        tools = json.loads(capsys.readouterr().out)
        assert [t["name"] for t in tools] == [
            "generate_promql_queries",
            "validate_promql_query",
            "discover_metrics",
            "create_dashboard",
            "deploy_dashboard",
        ]

    def test_validate_query(self, parser, settings, fake_registry, capsys):
        code = run(parser.parse_args(["validate-query", "up"]), settings)

        assert code == ExitCode.SUCCESS
        assert json.loads(capsys.readouterr().out)["valid"] is True

    def test_writes_output_file(self, parser, settings, fake_registry, tmp_path):
        out = tmp_path / "dashboard.json"
        panels_file = tmp_path / "panels.json"
        panels_file.write_text("[{}]")

        code = run(
            parser.parse_args(["create-dashboard", "T", "--panels-file", str(panels_file), "-o", str(out)]),
            settings,
        )

        assert code == ExitCode.SUCCESS
        assert json.loads(out.read_text())["dashboard"]["title"] == "T"

    def test_tool_error_sets_exit_code(self, parser, settings, fake_registry, capsys):
        code = run(parser.parse_args(["create-dashboard", "T", "--deploy"]), settings)

        assert code == ExitCode.CONFIG_ERROR
        assert "deployment is disabled" in capsys.readouterr().err


def test_main_without_command_prints_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli_main.main([])

    assert excinfo.value.code == ExitCode.VALIDATION_ERROR
    assert "usage: promdash" in capsys.readouterr().out
