"""Tests for logging setup of the ``screenmode`` namespace."""

from __future__ import annotations

import logging
import logging.handlers
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from screenmode import log


class SetupLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.addCleanup(self._reset_logger)

    @staticmethod
    def _reset_logger() -> None:
        for handler in list(log.logger.handlers):
            log.logger.removeHandler(handler)
            handler.close()
        log.logger.setLevel(logging.NOTSET)
        log.logger.propagate = True

    def test_stderr_handler_replaces_previous_handlers(self) -> None:
        first = log.setup_logging("INFO")
        second = log.setup_logging("debug")

        self.assertEqual(log.logger.handlers, [second])
        self.assertIsNot(first, second)
        self.assertIsInstance(second, logging.StreamHandler)
        self.assertEqual(log.logger.level, logging.DEBUG)

    def test_unknown_level_falls_back_to_warning(self) -> None:
        log.setup_logging("chatty")

        self.assertEqual(log.logger.level, logging.WARNING)

    def test_file_handler_writes_into_log_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_dir = Path(tmp) / "logs"
            with mock.patch.object(log, "LOG_DIR", log_dir):
                handler = log.setup_logging("DEBUG", log_to_file=True)
                logging.getLogger("screenmode.screen").debug("entered")
                handler.flush()

                self.assertIsInstance(handler, logging.handlers.RotatingFileHandler)
                self.assertIn("entered", (log_dir / log.LOG_FILENAME).read_text(encoding="utf-8"))
            self._reset_logger()

    def test_unusable_log_dir_falls_back_to_stderr(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("", encoding="utf-8")
            with mock.patch.object(log, "LOG_DIR", blocker / "logs"), mock.patch("sys.stderr"):
                handler = log.setup_logging(log_to_file=True)

            self.assertNotIsInstance(handler, logging.handlers.RotatingFileHandler)


if __name__ == "__main__":
    unittest.main()
