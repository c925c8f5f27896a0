"""Error types raised by terminal mode transitions.

Every failure leaving this package is a ``ScreenModeError`` subclass, so
callers can guard a whole enter/leave sequence with one ``except`` clause.
"""

from __future__ import annotations


class ScreenModeError(Exception):
    """Base class for terminal state transition failures."""


class TerminalIOError(ScreenModeError):
    """Writing a control sequence to the output stream failed."""

    def __init__(self, message: str, errno: int | None = None) -> None:
        super().__init__(message)
        self.errno = errno


class PlatformError(ScreenModeError):
    """The OS rejected a console handle lookup or a mode query/update."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class CompositionError(ScreenModeError):
    """A secondary step failed after the primary transition had succeeded.

    The primary transition has already been rolled back when this is raised.
    ``cause`` holds the error of the failing step.
    """

    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(f"{message}: {cause}")
        self.cause = cause
