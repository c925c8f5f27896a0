"""Raw-mode input discipline drivers.

Raw mode clears a fixed set of mode bits and restoring ORs the same bits
back over whatever the mode is at restore time. Bits outside the mask keep
their disable-time value; nothing is snapshotted at enable time.
"""

from __future__ import annotations

import logging
import sys

from .errors import PlatformError
from .winconsole import RAW_MODE_MASK

logger = logging.getLogger(__name__)

if sys.platform != "win32":
    try:
        import termios
    except ImportError:
        termios = None  # type: ignore[assignment]
else:
    termios = None  # type: ignore[assignment]

# Positions inside the list returned by termios.tcgetattr.
IFLAG, OFLAG, CFLAG, LFLAG = 0, 1, 2, 3


class RawModeDriver:
    """Switches one input stream between normal and raw discipline."""

    def enable(self) -> None:
        raise NotImplementedError

    def disable(self) -> None:
        raise NotImplementedError


class ConsoleRawMode(RawModeDriver):
    """Raw mode via the console input-mode bitmask."""

    def __init__(self, console, mask: int = RAW_MODE_MASK) -> None:
        self.console = console
        self.mask = mask

    def enable(self) -> None:
        handle = self.console.input_handle()
        current = self.console.get_mode(handle)
        self.console.set_mode(handle, current & ~self.mask)

    def disable(self) -> None:
        handle = self.console.input_handle()
        current = self.console.get_mode(handle)
        self.console.set_mode(handle, current | self.mask)


def default_termios_masks() -> dict[int, int]:
    """Bits cleared per termios flag word, in the spirit of cfmakeraw.

    Unlike ``tty.setraw`` this leaves ``c_cc[VMIN]`` and ``c_cc[VTIME]`` at
    whatever they hold, so non-canonical reads use the existing values.
    Writing them would break the exact enable/disable round trip, since the
    OR-mask restore has no way to put control characters back.
    """
    if termios is None:
        return {}
    return {
        IFLAG: termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON,
        OFLAG: termios.OPOST,
        LFLAG: termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG,
    }


class TermiosRawMode(RawModeDriver):
    """Raw mode via termios flag words of a tty file descriptor.

    Control characters and ``cflag`` are left alone so that a disable right
    after an enable reproduces the original attribute list exactly.
    """

    def __init__(self, fd: int, masks: dict[int, int] | None = None) -> None:
        self.fd = fd
        self.masks = default_termios_masks() if masks is None else dict(masks)

    def _get(self) -> list:
        if termios is None:
            raise PlatformError("termios is not available on this platform")
        try:
            return termios.tcgetattr(self.fd)
        except termios.error as exc:
            raise PlatformError(f"cannot read tty attributes of fd {self.fd}: {exc}", code=exc.args[0]) from exc

    def _set(self, attrs: list) -> None:
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, attrs)
        except termios.error as exc:
            raise PlatformError(f"cannot set tty attributes of fd {self.fd}: {exc}", code=exc.args[0]) from exc

    def enable(self) -> None:
        attrs = self._get()
        for index, mask in self.masks.items():
            attrs[index] &= ~mask
        self._set(attrs)

    def disable(self) -> None:
        attrs = self._get()
        for index, mask in self.masks.items():
            attrs[index] |= mask
        self._set(attrs)


class UnsupportedRawMode(RawModeDriver):
    """Marker for platforms with no raw-mode mechanism; every call fails."""

    def __init__(self, reason: str = "raw mode is not supported on this platform") -> None:
        self.reason = reason

    def enable(self) -> None:
        raise PlatformError(self.reason)

    def disable(self) -> None:
        raise PlatformError(self.reason)


def posix_raw_mode(stdin_fd: int) -> RawModeDriver:
    """Return the termios driver, or the unsupported marker without termios."""
    if termios is not None:
        return TermiosRawMode(stdin_fd)
    logger.debug("no raw-mode driver for platform %s", sys.platform)
    return UnsupportedRawMode()
