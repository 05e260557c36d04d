"""
Name-to-factory registry for the Prometheus and Grafana gateways.

Provider modules register themselves on import; the PromQL service and the
tool context build gateways by name so tests can swap in fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from promdash.core.errors import ConfigurationError

ProviderFactory = Callable[..., Any]


@dataclass(frozen=True)
class ProviderSpec:
    """A gateway factory and the name it was registered under."""

    name: str
    factory: ProviderFactory
    description: str | None = None


class ProviderRegistry:
    """In-memory gateway registry. Re-registering a name replaces it."""

    def __init__(self) -> None:
        self._providers: Dict[str, ProviderSpec] = {}

    def register(self, name: str, factory: ProviderFactory, *, description: str | None = None) -> None:
        if not name:
            raise ValueError("Provider name is required")
        self._providers[name] = ProviderSpec(name=name, factory=factory, description=description)

    def create(self, name: str, **kwargs: Any) -> Any:
        spec = self._providers.get(name)
        if spec is None:
            raise ConfigurationError(
                f"provider '{name}' is not registered",
                {"available": sorted(self._providers)},
            )
        return spec.factory(**kwargs)

    def list(self) -> List[ProviderSpec]:
        return sorted(self._providers.values(), key=lambda spec: spec.name)


provider_registry = ProviderRegistry()


def register_provider(name: str, factory: ProviderFactory, *, description: str | None = None) -> None:
    """Register a gateway factory on the process-wide registry."""
    provider_registry.register(name, factory, description=description)


def create_provider(name: str, **kwargs: Any) -> Any:
    """Build a gateway by name, e.g. ``create_provider("prometheus", url=...)``."""
    return provider_registry.create(name, **kwargs)


def list_providers() -> List[ProviderSpec]:
    return provider_registry.list()
