"""Accessibility mode flag.

Accessible mode trims verbose output and drops decorative symbols so that
screen readers and braille displays get fewer, plainer lines.
"""

from __future__ import annotations

_accessible: bool | None = None


def is_running_in_accessible_mode() -> bool:
    """Return True if accessible mode has been switched on."""
    return bool(_accessible)


def set_accessible(value: bool) -> None:
    """Set the accessible-mode flag; only the first call has any effect."""
    global _accessible
    if _accessible is None:
        _accessible = bool(value)