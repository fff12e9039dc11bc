"""Terminal colour escape codes, blanked out when colours are not wanted."""

from __future__ import annotations

import functools
import os
import sys

_IS_UNIX = os.name == "posix"

_CODES = {
    "RESET": "\x1b[39m",
    "BLACK": "\x1b[38;5;8m",
    "BLUE": "\x1b[38;5;12m",
    "CYAN": "\x1b[38;5;14m",
    "GREEN": "\x1b[38;5;10m",
    "MAGENTA": "\x1b[38;5;13m",
    "RED": "\x1b[38;5;9m",
    "WHITE": "\x1b[38;5;15m",
    "YELLOW": "\x1b[38;5;11m",
    # Requires true colour support
    "ORANGE": "\x1b[38;2;255;165;0m",
    "STYLE_BOLD": "\x1b[1m",
    "STYLE_RESET": "\x1b[0m",
    "ALL_RESET": "\x1b[0;39m",
}


def _isatty(stream) -> bool:
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (ValueError, OSError):
        return False


@functools.lru_cache(maxsize=None)
def colors_enabled() -> bool:
    """Whether coloured output is used; decided once and then cached."""
    if not _IS_UNIX:
        return False
    if "NO_COLOR" in os.environ:
        return False
    return _isatty(sys.stdout) and _isatty(sys.stderr)


def color(name: str) -> str:
    """Return the escape code called ``name``, or "" when colours are off.

    Raises KeyError for an unknown colour name.
    """
    code = _CODES[name.upper()]
    return code if colors_enabled() else ""