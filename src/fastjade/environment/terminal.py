"""Terminal color utilities for diagnostics and error messages.

ANSI color codes with automatic TTY detection and NO_COLOR support.
"""

from __future__ import annotations

import os
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
    "bright_yellow": "\033[93m",
    "bright_magenta": "\033[95m",
}

ColorName = Literal[
    "reset", "bold", "dim", "red", "yellow", "cyan",
    "bright_red", "bright_yellow", "bright_magenta",
]

def _should_use_colors() -> bool:
    """Check if terminal supports colors and user allows them.

    Respects:
        - NO_COLOR environment variable (https://no-color.org/)
        - FORCE_COLOR environment variable (overrides NO_COLOR)
        - sys.stderr.isatty() for TTY detection
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stderr.isatty()


_USE_COLORS = _should_use_colors()


def colorize(text: str, *colors: ColorName) -> str:
    """Apply ANSI color codes to text when colors are enabled.

    Example:
        >>> colorize("Error", "red", "bold")
        '\033[31m\033[1mError\033[0m'  # if colors supported
        'Error'  # if colors not supported
    """
    if not _USE_COLORS or not colors:
        return text
    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def warning_code(text: str) -> str:
    return colorize(text, "bright_yellow", "bold")


def internal_code(text: str) -> str:
    return colorize(text, "bright_magenta", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def line_number(text: str) -> str:
    return colorize(text, "yellow")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def format_source_line(lineno: int, content: str) -> str:
    """Format the offending template line for display.

    Example:
        >>> format_source_line(3, "a(href=)")
        '  3 | a(href=)'
    """
    return f"{line_number(f'{lineno:>3}')} | {content}"
