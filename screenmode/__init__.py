"""Public package surface for screenmode.

Switches the terminal between raw and normal input and between the main and
alternate screen buffers, restoring whatever was entered on release.
"""

from __future__ import annotations

from .commands import EnterAlternateScreen, LeaveAlternateScreen
from .errors import CompositionError, PlatformError, ScreenModeError, TerminalIOError
from .probe import select_backend, supports_ansi
from .screen import (
    AlternateScreenGuard,
    RawModeGuard,
    disable_raw_mode,
    enable_raw_mode,
    enter_alternate_screen,
)


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "AlternateScreenGuard",
    "CompositionError",
    "EnterAlternateScreen",
    "LeaveAlternateScreen",
    "PlatformError",
    "RawModeGuard",
    "ScreenModeError",
    "TerminalIOError",
    "disable_raw_mode",
    "enable_raw_mode",
    "enter_alternate_screen",
    "main",
    "select_backend",
    "supports_ansi",
]
