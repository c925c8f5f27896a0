"""Tests for the alternate-screen actions and their dispatch."""

from __future__ import annotations

import unittest
from unittest import mock

from fakes import RecordingBackend

from screenmode.backend import AnsiBackend
from screenmode.commands import EnterAlternateScreen, LeaveAlternateScreen, execute, queue


class CommandTests(unittest.TestCase):
    def test_actions_carry_fixed_payloads(self) -> None:
        self.assertEqual(EnterAlternateScreen().ansi_code, b"\x1b[?1049h")
        self.assertEqual(LeaveAlternateScreen().ansi_code, b"\x1b[?1049l")
        self.assertEqual(EnterAlternateScreen(), EnterAlternateScreen())
        self.assertNotEqual(EnterAlternateScreen(), LeaveAlternateScreen())

    def test_queue_appends_payloads_in_order(self) -> None:
        buffer = bytearray(b"x")

        result = queue(buffer, EnterAlternateScreen(), LeaveAlternateScreen())

        self.assertIs(result, buffer)
        self.assertEqual(bytes(buffer), b"x\x1b[?1049h\x1b[?1049l")

    def test_execute_on_ansi_backend_writes_once(self) -> None:
        backend = AnsiBackend(1, raw_mode=mock.Mock())

        with mock.patch("screenmode.backend.os.write", side_effect=lambda fd, data: len(data)) as write_mock:
            execute(backend, EnterAlternateScreen(), LeaveAlternateScreen())

        write_mock.assert_called_once()
        self.assertEqual(bytes(write_mock.call_args.args[1]), b"\x1b[?1049h\x1b[?1049l")

    def test_execute_on_native_backend_uses_fallbacks(self) -> None:
        backend = RecordingBackend()

        execute(backend, EnterAlternateScreen(), LeaveAlternateScreen(), LeaveAlternateScreen())

        self.assertEqual(backend.calls, ["enter-alt", "leave-alt", "leave-alt"])

    def test_execute_without_commands_does_nothing(self) -> None:
        backend = RecordingBackend()

        execute(backend)

        self.assertEqual(backend.calls, [])


if __name__ == "__main__":
    unittest.main()
