"""Tests for the escape-sequence and native console backends.

Verifies the exact control-sequence payloads, short-write handling, and the
console screen-buffer lifecycle of the native backend.
"""

from __future__ import annotations

import errno
import unittest
from unittest import mock

from fakes import INPUT_HANDLE, OUTPUT_HANDLE, FakeConsole

from screenmode.backend import AnsiBackend, NativeConsoleBackend
from screenmode.errors import PlatformError, TerminalIOError


def _written(write_mock: mock.Mock) -> list[tuple[int, bytes]]:
    return [(call.args[0], bytes(call.args[1])) for call in write_mock.call_args_list]


class AnsiBackendTests(unittest.TestCase):
    def test_enter_and_leave_write_alternate_screen_sequences(self) -> None:
        backend = AnsiBackend(1, raw_mode=mock.Mock())

        with mock.patch("screenmode.backend.os.write", side_effect=lambda fd, data: len(data)) as write_mock:
            backend.enter_alternate_screen()
            backend.leave_alternate_screen()

        self.assertEqual(_written(write_mock), [(1, b"\x1b[?1049h"), (1, b"\x1b[?1049l")])

    def test_short_write_is_retried_with_remaining_bytes(self) -> None:
        backend = AnsiBackend(4, raw_mode=mock.Mock())

        with mock.patch("screenmode.backend.os.write", side_effect=[3, 5]) as write_mock:
            backend.enter_alternate_screen()

        self.assertEqual(_written(write_mock), [(4, b"\x1b[?1049h"), (4, b"1049h")])

    def test_write_error_becomes_terminal_io_error(self) -> None:
        backend = AnsiBackend(1, raw_mode=mock.Mock())

        with mock.patch("screenmode.backend.os.write", side_effect=OSError(errno.EBADF, "Bad file descriptor")):
            with self.assertRaises(TerminalIOError) as ctx:
                backend.leave_alternate_screen()

        self.assertEqual(ctx.exception.errno, errno.EBADF)

    def test_zero_length_write_is_an_error(self) -> None:
        backend = AnsiBackend(1, raw_mode=mock.Mock())

        with mock.patch("screenmode.backend.os.write", return_value=0):
            with self.assertRaises(TerminalIOError):
                backend.enter_alternate_screen()

    def test_raw_mode_is_delegated_to_platform_driver(self) -> None:
        driver = mock.Mock()
        backend = AnsiBackend(1, raw_mode=driver)

        with mock.patch("screenmode.backend.os.write") as write_mock:
            backend.enable_raw_mode()
            backend.disable_raw_mode()

        write_mock.assert_not_called()
        self.assertEqual(driver.mock_calls, [mock.call.enable(), mock.call.disable()])

    def test_raw_mode_driver_errors_propagate(self) -> None:
        driver = mock.Mock()
        driver.enable.side_effect = PlatformError("no tty")
        backend = AnsiBackend(1, raw_mode=driver)

        with self.assertRaises(PlatformError):
            backend.enable_raw_mode()


class NativeConsoleBackendTests(unittest.TestCase):
    def test_raw_mode_applies_mask_to_input_handle(self) -> None:
        console = FakeConsole(input_mode=0b1111, output_mode=0b0110)
        backend = NativeConsoleBackend(console, raw_mask=0b0011)

        backend.enable_raw_mode()
        self.assertEqual(console.modes[INPUT_HANDLE], 0b1100)
        backend.disable_raw_mode()

        self.assertEqual(console.modes[INPUT_HANDLE], 0b1111)
        self.assertEqual(console.modes[OUTPUT_HANDLE], 0b0110)

    def test_enter_activates_new_buffer_and_leave_restores_primary(self) -> None:
        console = FakeConsole(next_buffer=0x50)
        backend = NativeConsoleBackend(console)

        backend.enter_alternate_screen()
        self.assertEqual(console.active, 0x50)

        backend.leave_alternate_screen()
        self.assertEqual(console.active, OUTPUT_HANDLE)
        self.assertEqual(console.closed, [0x50])

    def test_leave_twice_closes_buffer_once(self) -> None:
        console = FakeConsole(next_buffer=0x50)
        backend = NativeConsoleBackend(console)

        backend.enter_alternate_screen()
        backend.leave_alternate_screen()
        backend.leave_alternate_screen()

        self.assertEqual(console.active, OUTPUT_HANDLE)
        self.assertEqual(console.closed, [0x50])

    def test_enter_twice_reuses_single_buffer(self) -> None:
        console = FakeConsole(next_buffer=0x50)
        backend = NativeConsoleBackend(console)

        backend.enter_alternate_screen()
        backend.enter_alternate_screen()
        backend.leave_alternate_screen()

        self.assertEqual(console.next_buffer, 0x51)
        self.assertEqual(console.closed, [0x50])

    def test_activation_failure_closes_new_buffer(self) -> None:
        console = FakeConsole(next_buffer=0x50)
        console.fail.add("set_active_screen_buffer")
        backend = NativeConsoleBackend(console)

        with self.assertRaises(PlatformError):
            backend.enter_alternate_screen()

        self.assertEqual(console.closed, [0x50])
        self.assertEqual(console.active, OUTPUT_HANDLE)

    def test_close_failure_during_cleanup_keeps_original_error(self) -> None:
        console = FakeConsole()
        console.fail.update({"set_active_screen_buffer", "close_handle"})
        backend = NativeConsoleBackend(console)

        with self.assertRaises(PlatformError) as ctx:
            backend.enter_alternate_screen()

        self.assertEqual(str(ctx.exception), "set_active_screen_buffer failed")


if __name__ == "__main__":
    unittest.main()
