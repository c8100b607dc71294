from __future__ import annotations

"""
tkeys Entry Point.

Backs the 'tkeys' console script and 'python src/tkeys/main.py'. Expected
failures are handled by the CLI controller; anything else reaches the crash
hook installed here, which logs the traceback at CRITICAL and exits 1.
"""

import logging
import os
import sys
import traceback
from types import TracebackType
from typing import Optional, Type

# Running the file directly puts 'src/tkeys' on sys.path, not 'src'
_PACKAGE_PARENT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PACKAGE_PARENT not in sys.path:
    sys.path.insert(0, _PACKAGE_PARENT)


# -----------------------------------------------------------------------------
# CRASH HOOK
# -----------------------------------------------------------------------------

def report_crash(
        exc_type: Type[BaseException],
        exc: BaseException,
        tb: Optional[TracebackType],
) -> None:
    """
    sys.excepthook replacement for errors outside the tkeys hierarchy.

    Args:
        exc_type: Class of the uncaught exception.
        exc: The uncaught exception.
        tb: Its traceback.
    """
    details = "".join(traceback.format_exception(exc_type, exc, tb))
    logging.getLogger("tkeys.crash").critical(f"Unexpected failure: {exc}\n{details}")

    sys.stderr.write(f"tkeys crashed unexpectedly ({exc_type.__name__}).\n{details}")
    sys.exit(1)


def main() -> int:
    """Run the CLI with the crash hook installed and return its exit code."""
    sys.excepthook = report_crash

    from tkeys.interface.cli.app import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
