"""Module entrypoint for ``python -m screenmode``.

Argument parsing and logging setup happen in ``screenmode.cli``.
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
