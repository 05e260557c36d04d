"""Core promdash utilities."""

from promdash.core.errors import (
    ConfigurationError,
    ExitCode,
    PromdashError,
    ProviderError,
    ValidationError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ConfigurationError",
    "ExitCode",
    "PromdashError",
    "ProviderError",
    "ValidationError",
    "format_error_message",
    "main_with_error_handling",
]
