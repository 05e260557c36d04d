"""Tool protocol, shared context and registry for agent-exposed tools."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

from promdash.config.settings import Settings
from promdash.core.errors import ValidationError
from promdash.promql.service import PromQLService
from promdash.providers.base import GrafanaGateway
from promdash.providers.grafana import GrafanaProvider

GrafanaFactory = Callable[[str, Optional[str]], GrafanaGateway]


class ToolInputError(ValidationError):
    """Raised when tool arguments are missing or malformed."""


@dataclass
class ToolContext:
    """Services shared by all tools."""

    settings: Settings
    service: PromQLService
    grafana_factory: Optional[GrafanaFactory] = None

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "ToolContext":
        overrides.setdefault("service", PromQLService(timeout=settings.http_timeout))
        return cls(settings=settings, **overrides)

    def grafana(self, url: str, api_key: Optional[str]) -> GrafanaGateway:
        if self.grafana_factory is not None:
            return self.grafana_factory(url, api_key)
        return GrafanaProvider(
            url,
            api_key,
            timeout=self.settings.http_timeout,
            org_id=self.settings.grafana_org_id,
        )

    def resolve_grafana_url(self, args: Dict[str, Any]) -> str:
        """Explicit ``grafana_url`` argument first, then configuration."""
        url = args.get("grafana_url")
        if isinstance(url, str) and url:
            return url
        return self.settings.grafana_url or ""


@runtime_checkable
class Tool(Protocol):
    """A callable tool exposed to agents."""

    @property
    def name(self) -> str:
        ...

    @property
    def description(self) -> str:
        ...

    @property
    def parameters(self) -> Dict[str, Any]:
        """JSON schema of the tool arguments."""
        ...

    async def handle(self, args: Dict[str, Any]) -> str:
        """Run the tool and return its JSON result."""
        ...


class ToolRegistry:
    """In-memory registry for tools."""

    def __init__(self) -> None:
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def list(self) -> List[str]:
        return list(self._tools.keys())

    def describe(self) -> List[Dict[str, Any]]:
        """Tool definitions in function-calling format."""
        return [
            {"name": t.name, "description": t.description, "parameters": t.parameters}
            for t in self._tools.values()
        ]

    async def call(self, name: str, args: Dict[str, Any]) -> str:
        tool = self.get(name)
        if tool is None:
            raise ToolInputError(f"unknown tool: {name}")
        return await tool.handle(args)


def require_string(args: Dict[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value:
        raise ToolInputError(f"{key} is required and must be a string")
    return value


def optional_string(args: Dict[str, Any], key: str, default: str = "") -> str:
    value = args.get(key)
    if isinstance(value, str) and value:
        return value
    return default


def to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2)
