from __future__ import annotations

"""
Logging Setup.

A single QueueHandler is attached to the root logger and a QueueListener
thread forwards its records to the stderr and rotating-file handlers.
Every handler installed here is tagged, so repeated setups (each CLI
invocation in a test session, for instance) replace only tkeys' own
handlers and leave those of pytest or a host application alone.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from typing import List, Optional

from tkeys.infra.logging.config import LoggingConfig

HANDLER_TAG_ATTR: str = "_tkeys_handler"
CONFIGURED_FLAG_ATTR: str = "_tkeys_configured"
QUEUE_LISTENER_ATTR: str = "_tkeys_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Install the tkeys handler chain on the root logger.

    Args:
        cfg: Logging settings.
        force: Replace an existing tkeys setup instead of keeping it.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    shutdown_logging()
    root.setLevel(cfg.level_int)

    sinks = _build_sinks(cfg)
    if not sinks:
        return root

    records: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    listener = QueueListener(records, *sinks, respect_handler_level=True)
    listener.start()

    root.addHandler(_tagged(QueueHandler(records)))
    setattr(root, QUEUE_LISTENER_ATTR, listener)
    setattr(root, CONFIGURED_FLAG_ATTR, True)

    # Records still queued when the interpreter exits must reach the sinks
    atexit.register(_drain, listener)
    return root


def shutdown_logging() -> None:
    """Flush pending records and remove every tkeys handler."""
    root = logging.getLogger()

    listener = getattr(root, QUEUE_LISTENER_ATTR, None)
    if listener is not None:
        _drain(listener)
        for sink in listener.handlers:
            sink.close()
        setattr(root, QUEUE_LISTENER_ATTR, None)

    for handler in list(root.handlers):
        if getattr(handler, HANDLER_TAG_ATTR, False):
            root.removeHandler(handler)
            handler.close()

    setattr(root, CONFIGURED_FLAG_ATTR, False)


def get_logger(name: str) -> logging.Logger:
    """Named logger, usually for __name__."""
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _build_sinks(cfg: LoggingConfig) -> List[logging.Handler]:
    sinks: List[logging.Handler] = []

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(cfg.console_fmt))
        sinks.append(console)

    if cfg.log_file:
        log_file = _open_log_file(cfg)
        if log_file is not None:
            log_file.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
            sinks.append(log_file)

    for sink in sinks:
        sink.setLevel(cfg.level_int)
        _tagged(sink)
    return sinks


def _open_log_file(cfg: LoggingConfig) -> Optional[RotatingFileHandler]:
    """
    Open the rotating log file.

    A log file that cannot be opened only costs the file copy of the log:
    the failure is reported on stderr and the command still runs.
    """
    try:
        os.makedirs(os.path.dirname(os.path.abspath(cfg.log_file)), exist_ok=True)
        return RotatingFileHandler(
            cfg.log_file,
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{cfg.log_file}': {e}\n")
        return None


def _tagged(handler: logging.Handler) -> logging.Handler:
    setattr(handler, HANDLER_TAG_ATTR, True)
    return handler


def _drain(listener: QueueListener) -> None:
    """Stop the listener thread if it is still running, then flush its sinks."""
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
    for sink in listener.handlers:
        sink.flush()
