from __future__ import annotations

"""
Configuration Scaffolding Service (init).

Writes the packaged starter configuration to disk, refusing to replace an
existing file unless explicitly forced.
"""

import logging
import os
from importlib import resources

from tkeys.infra.fs import write_text

logger = logging.getLogger(__name__)

TEMPLATE_PACKAGE = "tkeys"
TEMPLATE_RESOURCE = "templates/t_config.py.template"


def load_config_template() -> str:
    """Read the starter configuration bundled with the package."""
    return resources.files(TEMPLATE_PACKAGE).joinpath(TEMPLATE_RESOURCE).read_text(encoding="utf-8")


def generate_config_file(path: str, force: bool = False) -> bool:
    """
    Create a starter configuration file.

    Args:
        path: Destination of the configuration file.
        force: Overwrite an existing file.

    Returns:
        bool: True if the file was written, False if an existing file was kept.
    """
    if os.path.exists(path) and not force:
        logger.warning(f"Config file {path} already exists, use --force to overwrite")
        return False

    write_text(path, load_config_template())
    logger.info(f"Config file created at {path}")
    return True
