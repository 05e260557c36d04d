"""
CLI commands for promdash.
"""

from promdash.cli.main import build_parser, main, tool_call

__all__ = [
    "build_parser",
    "main",
    "tool_call",
]
