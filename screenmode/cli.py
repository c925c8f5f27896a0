"""Command-line front door for screenmode.

``probe`` reports the selected backend, ``demo`` round-trips through the
alternate screen, and ``reset`` recovers a terminal left in raw mode or on
the alternate screen by a crashed program.
"""

from __future__ import annotations

import argparse
import sys
import time

from . import config
from .backend import AnsiBackend
from .errors import ScreenModeError
from .log import setup_logging
from .probe import select_backend, supports_ansi
from .screen import enter_alternate_screen

DEMO_TEXT = (
    "screenmode demo",
    "",
    "This is the alternate screen buffer.",
    "The main screen is restored when the demo ends.",
)


def _non_negative_float(value: str) -> float:
    """argparse type for non-negative durations."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="screenmode",
        description="Inspect and exercise terminal raw mode and alternate screen handling.",
    )
    parser.add_argument(
        "--log-level",
        choices=config.LOG_LEVEL_CHOICES,
        type=str.upper,
        default=None,
        help="Logging threshold (default: configured value or WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("probe", help="Print the selected backend and escape-sequence support.")

    demo = subparsers.add_parser("demo", help="Show a message on the alternate screen, then restore.")
    demo.add_argument("--raw", action="store_true", help="Also switch input to raw mode.")
    demo.add_argument("--seconds", type=_non_negative_float, default=2.0, help="How long to stay (default: 2).")

    subparsers.add_parser("reset", help="Switch raw mode off and return to the main screen.")
    return parser


def _run_probe() -> int:
    backend = select_backend()
    print(f"backend: {backend.name}")
    print(f"preference: {config.load_backend_preference()}")
    print(f"escape sequences: {'yes' if supports_ansi() else 'no'}")
    return 0


def _run_demo(raw: bool, seconds: float) -> int:
    try:
        with enter_alternate_screen(raw=raw) as guard:
            if isinstance(guard.backend, AnsiBackend):
                # Raw output does no newline translation.
                body = "\r\n".join(DEMO_TEXT) + "\r\n"
                guard.backend.write(b"\x1b[2J\x1b[H" + body.encode("utf-8"))
            time.sleep(seconds)
    except ScreenModeError as exc:
        print(f"screenmode: {exc}", file=sys.stderr)
        return 1
    return 0


def _run_reset() -> int:
    backend = select_backend()
    status = 0
    for step in (backend.disable_raw_mode, backend.leave_alternate_screen):
        try:
            step()
        except ScreenModeError as exc:
            print(f"screenmode: {exc}", file=sys.stderr)
            status = 1
    return status


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging, and run the chosen command."""
    args = build_parser().parse_args(argv)
    level = args.log_level or config.load_log_level()
    setup_logging(level, log_to_file=args.command == "demo")

    if args.command == "probe":
        return _run_probe()
    if args.command == "demo":
        return _run_demo(args.raw, args.seconds)
    return _run_reset()
