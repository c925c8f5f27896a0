"""Logging setup for the ``screenmode`` logger namespace.

Library modules only create loggers; handlers are attached here, normally by
the command line. While the alternate screen is active stderr output lands on
the alternate buffer, so the demo logs to a rotating file instead.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

logger = logging.getLogger(APP_NAME)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILENAME = "screenmode.log"
LOG_DIR = Path(user_log_dir(APP_NAME, appauthor=False))


def setup_logging(level: str = "WARNING", log_to_file: bool = False) -> logging.Handler:
    """Attach one handler to the ``screenmode`` logger and set its level.

    Handlers installed by a previous call are removed first. When the log
    directory cannot be created the handler falls back to stderr. Never
    raises for I/O problems.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    numeric_level = getattr(logging, str(level).upper(), logging.WARNING)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    handler: logging.Handler
    if log_to_file:
        try:
            LOG_DIR.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.RotatingFileHandler(
                LOG_DIR / LOG_FILENAME,
                maxBytes=512 * 1024,
                backupCount=2,
                encoding="utf-8",
            )
        except OSError as exc:
            print(f"screenmode: cannot open log file in {LOG_DIR}: {exc}", file=sys.stderr)
            handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False
    return handler
