"""Thin ``ctypes`` wrapper over the Win32 console API.

Only the calls needed for mode bitmasks and screen-buffer switching are
bound. ``kernel32`` is loaded on first use so importing this module is safe
on every platform.
"""

from __future__ import annotations

import ctypes
import logging

from .errors import PlatformError

logger = logging.getLogger(__name__)

STD_INPUT_HANDLE = -10
STD_OUTPUT_HANDLE = -11

ENABLE_PROCESSED_INPUT = 0x0001
ENABLE_LINE_INPUT = 0x0002
ENABLE_ECHO_INPUT = 0x0004

ENABLE_PROCESSED_OUTPUT = 0x0001
ENABLE_WRAP_AT_EOL_OUTPUT = 0x0002
ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004

GENERIC_READ = 0x80000000
GENERIC_WRITE = 0x40000000
FILE_SHARE_READ = 0x00000001
FILE_SHARE_WRITE = 0x00000002
CONSOLE_TEXTMODE_BUFFER = 1

# Signal generation, line buffering/editing, and echo. ENABLE_WRAP_AT_EOL_OUTPUT
# is the same bit as ENABLE_LINE_INPUT.
RAW_MODE_MASK = ENABLE_PROCESSED_INPUT | ENABLE_LINE_INPUT | ENABLE_ECHO_INPUT


def _load_kernel32():
    from ctypes import wintypes

    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)  # type: ignore[attr-defined]
    kernel32.GetStdHandle.argtypes = [wintypes.DWORD]
    kernel32.GetStdHandle.restype = wintypes.HANDLE
    kernel32.GetConsoleMode.argtypes = [wintypes.HANDLE, wintypes.LPDWORD]
    kernel32.GetConsoleMode.restype = wintypes.BOOL
    kernel32.SetConsoleMode.argtypes = [wintypes.HANDLE, wintypes.DWORD]
    kernel32.SetConsoleMode.restype = wintypes.BOOL
    kernel32.CreateConsoleScreenBuffer.argtypes = [
        wintypes.DWORD,
        wintypes.DWORD,
        wintypes.LPVOID,
        wintypes.DWORD,
        wintypes.LPVOID,
    ]
    kernel32.CreateConsoleScreenBuffer.restype = wintypes.HANDLE
    kernel32.SetConsoleActiveScreenBuffer.argtypes = [wintypes.HANDLE]
    kernel32.SetConsoleActiveScreenBuffer.restype = wintypes.BOOL
    kernel32.CloseHandle.argtypes = [wintypes.HANDLE]
    kernel32.CloseHandle.restype = wintypes.BOOL
    return kernel32


def _last_error(action: str) -> PlatformError:
    code = ctypes.get_last_error()  # type: ignore[attr-defined]
    detail = ctypes.FormatError(code).strip() if code else "unknown error"  # type: ignore[attr-defined]
    return PlatformError(f"{action} failed: {detail}", code=code)


class Win32Console:
    """Console handles and mode bitmasks of the current process."""

    def __init__(self, kernel32=None) -> None:
        self._kernel32 = kernel32

    @property
    def kernel32(self):
        if self._kernel32 is None:
            try:
                self._kernel32 = _load_kernel32()
            except (AttributeError, OSError) as exc:
                raise PlatformError(f"kernel32 is unavailable: {exc}") from exc
        return self._kernel32

    def _std_handle(self, which: int) -> int:
        from ctypes import wintypes

        handle = self.kernel32.GetStdHandle(which)
        if handle is None or handle == wintypes.HANDLE(-1).value:
            raise _last_error("GetStdHandle")
        return int(handle)

    def input_handle(self) -> int:
        return self._std_handle(STD_INPUT_HANDLE)

    def output_handle(self) -> int:
        return self._std_handle(STD_OUTPUT_HANDLE)

    def get_mode(self, handle: int) -> int:
        from ctypes import wintypes

        mode = wintypes.DWORD()
        if not self.kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
            raise _last_error("GetConsoleMode")
        return int(mode.value)

    def set_mode(self, handle: int, mode: int) -> None:
        if not self.kernel32.SetConsoleMode(handle, mode):
            raise _last_error("SetConsoleMode")
        logger.debug("console mode of handle %#x set to %#06x", handle, mode)

    def create_screen_buffer(self) -> int:
        """Allocate a new text-mode screen buffer and return its handle."""
        from ctypes import wintypes

        handle = self.kernel32.CreateConsoleScreenBuffer(
            GENERIC_READ | GENERIC_WRITE,
            FILE_SHARE_READ | FILE_SHARE_WRITE,
            None,
            CONSOLE_TEXTMODE_BUFFER,
            None,
        )
        if handle is None or handle == wintypes.HANDLE(-1).value:
            raise _last_error("CreateConsoleScreenBuffer")
        return int(handle)

    def set_active_screen_buffer(self, handle: int) -> None:
        if not self.kernel32.SetConsoleActiveScreenBuffer(handle):
            raise _last_error("SetConsoleActiveScreenBuffer")

    def close_handle(self, handle: int) -> None:
        if not self.kernel32.CloseHandle(handle):
            raise _last_error("CloseHandle")

    def enable_virtual_terminal_processing(self) -> bool:
        """Try to switch the output handle to VT processing.

        Returns ``False`` when the console rejects the flag.
        """
        handle = self.output_handle()
        mode = self.get_mode(handle)
        if mode & ENABLE_VIRTUAL_TERMINAL_PROCESSING:
            return True
        try:
            self.set_mode(handle, mode | ENABLE_VIRTUAL_TERMINAL_PROCESSING)
        except PlatformError as exc:
            logger.debug("virtual terminal processing rejected: %s", exc)
            return False
        return True
