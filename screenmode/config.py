"""Persistent JSON config helpers.

Stores the backend preference and the default log level.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "screenmode"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
BACKEND_ENV_VAR = "SCREENMODE_BACKEND"

BACKEND_CHOICES = ("auto", "ansi", "native")
DEFAULT_BACKEND = "auto"
LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("cannot write config %s: %s", CONFIG_PATH, exc)


def _normalize_backend(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    return candidate if candidate in BACKEND_CHOICES else None


def load_backend_preference() -> str:
    """Return ``auto``, ``ansi`` or ``native``.

    The ``SCREENMODE_BACKEND`` environment variable wins over the config file.
    Unknown values are logged and treated as ``auto``.
    """
    env_value = os.environ.get(BACKEND_ENV_VAR)
    if env_value:
        backend = _normalize_backend(env_value)
        if backend is not None:
            return backend
        logger.warning("ignoring %s=%r; expected one of %s", BACKEND_ENV_VAR, env_value, ", ".join(BACKEND_CHOICES))

    value = load_config().get("backend")
    if value is None:
        return DEFAULT_BACKEND
    backend = _normalize_backend(value)
    if backend is None:
        logger.warning("ignoring configured backend %r", value)
        return DEFAULT_BACKEND
    return backend


def save_backend_preference(backend: str) -> None:
    """Persist the backend preference; invalid names are rejected."""
    normalized = _normalize_backend(backend)
    if normalized is None:
        raise ValueError(f"unknown backend {backend!r}; expected one of {', '.join(BACKEND_CHOICES)}")
    config = load_config()
    config["backend"] = normalized
    save_config(config)


def load_log_level() -> str:
    """Load persisted log level name, defaulting to ``WARNING``."""
    value = load_config().get("log_level")
    if not isinstance(value, str):
        return DEFAULT_LOG_LEVEL
    level = value.strip().upper()
    return level if level in LOG_LEVEL_CHOICES else DEFAULT_LOG_LEVEL
