"""Guards for raw mode and the alternate screen.

A guard stands for one active transition. Releasing it, explicitly, by
leaving a ``with`` block, or by dropping the last reference, runs the
inverse transition once with failures discarded. Explicit ``disable()`` and
``leave()`` calls raise their errors and may be repeated.

The terminal has a single current mode per process. All transitions share
one re-entrant lock so concurrent callers cannot interleave a mode
read-modify-write. Nested raw-mode sessions are not counted: a second
session's restore simply overwrites the first.
"""

from __future__ import annotations

import logging
import threading

from .backend import PlatformBackend
from .errors import CompositionError
from .probe import select_backend

logger = logging.getLogger(__name__)

_TRANSITION_LOCK = threading.RLock()


class RawModeGuard:
    """Active raw-mode session on a shared backend."""

    def __init__(self, backend: PlatformBackend) -> None:
        self.backend = backend
        self.restore_on_release = True
        self._released = False

    def set_restore_on_release(self, restore: bool) -> None:
        """Choose whether releasing the guard switches raw mode off."""
        self.restore_on_release = bool(restore)

    def disable(self) -> None:
        """Switch raw mode off now; errors propagate."""
        with _TRANSITION_LOCK:
            self.backend.disable_raw_mode()

    def release(self) -> None:
        """Implicit restore: at most once, never raises."""
        if self._released:
            return
        self._released = True
        if not self.restore_on_release:
            logger.debug("leaving raw mode active on release")
            return
        try:
            self.disable()
        except Exception as exc:
            logger.debug("discarding raw-mode restore failure: %s", exc)

    def __enter__(self) -> RawModeGuard:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self) -> None:
        if not getattr(self, "_released", True):
            self.release()


class AlternateScreenGuard:
    """Active alternate-screen session, optionally owning raw mode."""

    def __init__(self, backend: PlatformBackend, raw_mode: RawModeGuard | None = None) -> None:
        self.backend = backend
        self._raw_mode = raw_mode
        self._released = False

    @property
    def raw_mode(self) -> RawModeGuard | None:
        return self._raw_mode

    def leave(self) -> None:
        """Restore the main screen, switching nested raw mode off first.

        The screen is restored even when switching raw mode off fails or is
        interrupted; the first error is raised once both steps have run.
        """
        first_error: BaseException | None = None
        with _TRANSITION_LOCK:
            raw_mode = self._raw_mode
            try:
                if raw_mode is not None and raw_mode.restore_on_release:
                    raw_mode.disable()
            except Exception as exc:
                first_error = exc
            finally:
                try:
                    self.backend.leave_alternate_screen()
                except Exception as exc:
                    if first_error is None:
                        first_error = exc
                    else:
                        logger.debug("also failed to leave alternate screen: %s", exc)
        if first_error is not None:
            raise first_error

    def release(self) -> None:
        """Implicit restore: at most once, never raises."""
        if self._released:
            return
        self._released = True
        if self._raw_mode is not None:
            # The nested guard is handled by leave(); keep its own release idle.
            self._raw_mode._released = True
        try:
            self.leave()
        except Exception as exc:
            logger.debug("discarding alternate-screen restore failure: %s", exc)

    def __enter__(self) -> AlternateScreenGuard:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self) -> None:
        if not getattr(self, "_released", True):
            self.release()


def enable_raw_mode(backend: PlatformBackend | None = None) -> RawModeGuard:
    """Switch the terminal to raw input and return the guard restoring it."""
    if backend is None:
        backend = select_backend()
    with _TRANSITION_LOCK:
        backend.enable_raw_mode()
    return RawModeGuard(backend)


def disable_raw_mode(backend: PlatformBackend | None = None) -> None:
    """Switch raw input off without a guard, e.g. after opting out of restore."""
    if backend is None:
        backend = select_backend()
    with _TRANSITION_LOCK:
        backend.disable_raw_mode()


def enter_alternate_screen(raw: bool = False, backend: PlatformBackend | None = None) -> AlternateScreenGuard:
    """Switch to the alternate screen, optionally in raw mode.

    If raw mode cannot be enabled the alternate screen is left again before
    ``CompositionError`` is raised; no guard is returned in that case.
    Interrupts such as ``KeyboardInterrupt`` are re-raised unwrapped after
    the same rollback.
    """
    if backend is None:
        backend = select_backend()
    with _TRANSITION_LOCK:
        backend.enter_alternate_screen()
        raw_guard = None
        if raw:
            try:
                raw_guard = enable_raw_mode(backend)
            except BaseException as exc:
                try:
                    backend.leave_alternate_screen()
                except Exception as rollback_exc:
                    logger.debug("discarding alternate-screen rollback failure: %s", rollback_exc)
                if not isinstance(exc, Exception):
                    raise
                raise CompositionError("cannot enable raw mode on the alternate screen", exc) from exc
        return AlternateScreenGuard(backend, raw_guard)
