"""Named screen actions for command-dispatch layers.

Each action carries its fixed control-sequence payload and a fallback that
goes through the native console API when escape sequences are not honored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .backend import PlatformBackend

ENTER_ALTERNATE_SCREEN = b"\x1b[?1049h"
LEAVE_ALTERNATE_SCREEN = b"\x1b[?1049l"


class Command:
    """Terminal action with an escape-sequence form and a native form."""

    ansi_code: bytes = b""

    def execute_native(self, backend: PlatformBackend) -> None:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EnterAlternateScreen(Command):
    """Switch the display to the alternate screen buffer."""

    ansi_code = ENTER_ALTERNATE_SCREEN

    def execute_native(self, backend: PlatformBackend) -> None:
        backend.enter_alternate_screen()


class LeaveAlternateScreen(Command):
    """Switch the display back to the main screen buffer."""

    ansi_code = LEAVE_ALTERNATE_SCREEN

    def execute_native(self, backend: PlatformBackend) -> None:
        backend.leave_alternate_screen()


def queue(buffer: bytearray, *commands: Command) -> bytearray:
    """Append the escape-sequence payload of ``commands`` to ``buffer``."""
    for command in commands:
        buffer += command.ansi_code
    return buffer


def execute(backend: PlatformBackend, *commands: Command) -> None:
    """Run ``commands`` against ``backend`` using the form it understands.

    Escape-sequence backends receive all payloads in a single write; other
    backends run each command's native fallback in order.
    """
    from .backend import AnsiBackend

    if not commands:
        return
    if isinstance(backend, AnsiBackend):
        backend.write(bytes(queue(bytearray(), *commands)))
        return
    for command in commands:
        command.execute_native(backend)
