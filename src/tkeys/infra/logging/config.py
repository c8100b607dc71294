from __future__ import annotations

"""
Logging Settings.

Maps the CLI verbosity flags onto the settings consumed by
configure_logging. Command summaries go to stdout; every log record goes
to stderr and, optionally, to a rotating file.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

LEVEL_NAMES: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Debug output names the emitting module; plain progress output does not
_PROGRESS_FMT = "%(levelname)s | %(message)s"
_DEBUG_FMT = "%(levelname)s | %(name)s | %(message)s"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings for one logging setup.

    Attributes:
        level: Name of the minimum severity, e.g. "INFO".
        console: Emit records on stderr.
        log_file: Rotating log file, if any.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept next to the active one.
        console_fmt: Format of stderr lines.
        file_fmt: Format of log file lines.
        datefmt: Timestamp format of log file lines.
    """
    level: str = "WARNING"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    console_fmt: str = _PROGRESS_FMT
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @property
    def level_int(self) -> int:
        return LEVEL_NAMES.get(str(self.level).strip().upper(), logging.WARNING)

    @classmethod
    def from_flags(cls, verbose: bool = False, debug: bool = False, log_file: Optional[str] = None) -> LoggingConfig:
        """
        Settings for the --verbose / --debug / --log-file flags.

        Without flags only warnings and errors are shown. --verbose adds the
        per-workspace and per-file progress lines, --debug adds scanning
        details and names the logger of each line.
        """
        if debug:
            return cls(level="DEBUG", log_file=log_file, console_fmt=_DEBUG_FMT)
        if verbose:
            return cls(level="INFO", log_file=log_file)
        return cls(level="WARNING", log_file=log_file)
