"""
Console output helpers built on rich.

Respects NO_COLOR and FORCE_COLOR; falls back to plain text when stdout is
not a terminal.
"""

from __future__ import annotations

import os

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

# Nord palette
PROMDASH_THEME = Theme(
    {
        "info": "#88C0D0",
        "success": "#A3BE8C",
        "warning": "#EBCB8B",
        "error": "#BF616A bold",
        "muted": "#D8DEE9",
    }
)

console = Console(
    theme=PROMDASH_THEME,
    force_terminal=True if os.environ.get("FORCE_COLOR") is not None else None,
    no_color=os.environ.get("NO_COLOR") is not None,
)

err_console = Console(theme=PROMDASH_THEME, stderr=True)


def success(message: str) -> None:
    err_console.print(f"[success]✓ {escape(message)}[/success]")


def error(message: str) -> None:
    err_console.print(f"[error]✗ {escape(message)}[/error]")


def print_json(payload: str) -> None:
    """Print a JSON document; highlighted on terminals, raw otherwise."""
    if console.is_terminal:
        console.print_json(payload)
    else:
        print(payload)
