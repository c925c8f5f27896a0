"""Platform backends performing the actual terminal state transitions.

``AnsiBackend`` writes control sequences to an output file descriptor.
``NativeConsoleBackend`` drives the Windows console API directly. Both
delegate raw mode to the driver native to their platform family.
"""

from __future__ import annotations

import errno
import logging
import os

from .commands import ENTER_ALTERNATE_SCREEN, LEAVE_ALTERNATE_SCREEN
from .errors import PlatformError, TerminalIOError
from .rawmode import ConsoleRawMode, RawModeDriver
from .winconsole import RAW_MODE_MASK

logger = logging.getLogger(__name__)


class PlatformBackend:
    """Mechanism for switching screen buffer and input discipline."""

    name = "abstract"

    def enter_alternate_screen(self) -> None:
        raise NotImplementedError

    def leave_alternate_screen(self) -> None:
        raise NotImplementedError

    def enable_raw_mode(self) -> None:
        raise NotImplementedError

    def disable_raw_mode(self) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class AnsiBackend(PlatformBackend):
    """Escape-sequence backend; never reads from the stream."""

    name = "ansi"

    def __init__(self, stdout_fd: int, raw_mode: RawModeDriver) -> None:
        self.stdout_fd = stdout_fd
        self.raw_mode = raw_mode

    def write(self, payload: bytes) -> None:
        """Write ``payload`` completely, retrying short writes."""
        view = memoryview(payload)
        while view:
            try:
                written = os.write(self.stdout_fd, view)
            except OSError as exc:
                raise TerminalIOError(
                    f"cannot write control sequence to fd {self.stdout_fd}: {exc.strerror or exc}",
                    errno=exc.errno,
                ) from exc
            if written <= 0:
                raise TerminalIOError(f"short write to fd {self.stdout_fd}", errno=errno.EIO)
            view = view[written:]

    def enter_alternate_screen(self) -> None:
        self.write(ENTER_ALTERNATE_SCREEN)
        logger.debug("entered alternate screen via escape sequence")

    def leave_alternate_screen(self) -> None:
        self.write(LEAVE_ALTERNATE_SCREEN)
        logger.debug("left alternate screen via escape sequence")

    def enable_raw_mode(self) -> None:
        self.raw_mode.enable()
        logger.debug("raw mode enabled by %s", type(self.raw_mode).__name__)

    def disable_raw_mode(self) -> None:
        self.raw_mode.disable()
        logger.debug("raw mode disabled by %s", type(self.raw_mode).__name__)


class NativeConsoleBackend(PlatformBackend):
    """Windows console backend for consoles that ignore control sequences.

    The alternate screen is a freshly allocated console screen buffer. Only
    one exists at a time; entering again while one is active reuses it.
    """

    name = "native"

    def __init__(self, console, raw_mask: int = RAW_MODE_MASK) -> None:
        self.console = console
        self.raw_mask = raw_mask
        self.raw_mode = ConsoleRawMode(console, raw_mask)
        self._alternate_handle: int | None = None

    def enter_alternate_screen(self) -> None:
        handle = self._alternate_handle
        if handle is None:
            handle = self.console.create_screen_buffer()
        try:
            self.console.set_active_screen_buffer(handle)
        except PlatformError:
            if self._alternate_handle is None:
                try:
                    self.console.close_handle(handle)
                except PlatformError as exc:
                    logger.debug("discarding close failure for buffer %#x: %s", handle, exc)
            raise
        self._alternate_handle = handle
        logger.debug("activated alternate console buffer %#x", handle)

    def leave_alternate_screen(self) -> None:
        self.console.set_active_screen_buffer(self.console.output_handle())
        handle, self._alternate_handle = self._alternate_handle, None
        if handle is not None:
            self.console.close_handle(handle)
            logger.debug("released alternate console buffer %#x", handle)

    def enable_raw_mode(self) -> None:
        self.raw_mode.enable()
        logger.debug("console raw mode enabled (mask %#06x)", self.raw_mask)

    def disable_raw_mode(self) -> None:
        self.raw_mode.disable()
        logger.debug("console raw mode disabled (mask %#06x)", self.raw_mask)
