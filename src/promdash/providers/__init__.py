"""Provider utilities and built-in registrations."""

# Import built-in providers for side effects (registration)
from promdash.providers import grafana as _grafana  # noqa: F401
from promdash.providers import prometheus as _prometheus  # noqa: F401
from promdash.providers.registry import (
    create_provider,
    list_providers,
    register_provider,
)

__all__ = [
    "create_provider",
    "list_providers",
    "register_provider",
]
