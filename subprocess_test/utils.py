from __future__ import annotations

import os
import sys
from functools import partial
from typing import Mapping, Optional


LOG_PREFIX = "[subprocess-test]"

print = partial(__import__("builtins").print, file=sys.stderr, flush=True)


class Color:
    """ANSI color codes for terminal output"""

    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


class _NullColor:
    GREEN = ""
    RED = ""
    YELLOW = ""
    BLUE = ""
    RESET = ""
    BOLD = ""


def color_for(stream) -> object:
    """Return ``Color`` when ``stream`` is a terminal, a no-op palette otherwise."""

    isatty = getattr(stream, "isatty", None)
    try:
        if isatty is not None and isatty():
            return Color
    except ValueError:
        pass
    return _NullColor


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format."""

    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.2f}s"


def env_flag(name: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True if the specified environment variable is truthy."""

    source = os.environ if environ is None else environ
    value = source.get(name)
    if value is None:
        return False

    normalized = value.strip().lower()
    if not normalized:
        return False

    return normalized not in {"0", "false", "no", "off"}


def log_debug(message: str, *, verbose: bool) -> None:
    if not verbose:
        return
    palette = color_for(sys.stderr)
    print(f"{palette.BLUE}{LOG_PREFIX}{palette.RESET} {message}")


def log_warning(message: str) -> None:
    palette = color_for(sys.stderr)
    print(f"{palette.YELLOW}{LOG_PREFIX} Warning: {message}{palette.RESET}")
