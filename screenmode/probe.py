"""Backend selection and escape-sequence capability probing.

POSIX terminals always take escape sequences. On Windows the console is
probed once (the probe may flip the VT-processing flag, so it is never
repeated) and the chosen backend is reused for the rest of the process.
"""

from __future__ import annotations

import functools
import logging
import os
import sys
import threading

from . import config
from .backend import AnsiBackend, NativeConsoleBackend, PlatformBackend
from .errors import PlatformError
from .rawmode import ConsoleRawMode, posix_raw_mode

logger = logging.getLogger(__name__)

STDIN_FILENO = 0
STDOUT_FILENO = 1

_SELECT_LOCK = threading.Lock()
_SELECTED_BACKEND: PlatformBackend | None = None


def is_windows() -> bool:
    return sys.platform == "win32"


@functools.lru_cache(maxsize=1)
def default_console():
    """Process-wide console collaborator used by Windows backends."""
    from .winconsole import Win32Console

    return Win32Console()


def _term_declares_ansi() -> bool:
    # mintty and Git Bash export TERM while refusing console API calls.
    term = os.environ.get("TERM", "").strip()
    return bool(term) and term != "dumb"


@functools.lru_cache(maxsize=1)
def supports_ansi() -> bool:
    """Return whether the active console honors control sequences.

    Computed once per process. Failures to inspect the console report
    ``False`` so that selection falls back to the native backend.
    """
    if not is_windows():
        return True
    if _term_declares_ansi():
        return True
    try:
        return default_console().enable_virtual_terminal_processing()
    except PlatformError as exc:
        logger.debug("console capability probe failed: %s", exc)
        return False


def _build_backend(preference: str) -> PlatformBackend:
    if not is_windows():
        if preference == "native":
            logger.warning("native console backend is only available on Windows; using escape sequences")
        return AnsiBackend(STDOUT_FILENO, posix_raw_mode(STDIN_FILENO))

    console = default_console()
    if preference == "ansi" or (preference == "auto" and supports_ansi()):
        # Raw input on Windows always goes through the console API.
        return AnsiBackend(STDOUT_FILENO, ConsoleRawMode(console))
    return NativeConsoleBackend(console)


def select_backend() -> PlatformBackend:
    """Return the process-wide backend, choosing it on first call."""
    global _SELECTED_BACKEND
    with _SELECT_LOCK:
        if _SELECTED_BACKEND is None:
            preference = config.load_backend_preference()
            _SELECTED_BACKEND = _build_backend(preference)
            logger.debug("selected %s backend (preference %s)", _SELECTED_BACKEND.name, preference)
        return _SELECTED_BACKEND
