from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared configuration objects and a small project-tree builder.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from tkeys.domain.config import Config, LanguageNode, Target  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def en_fr_config() -> Config:
    """English root with a French child, scanning '<root>/src'."""
    return Config(
        languages=LanguageNode(name="en", children=(LanguageNode(name="fr"),)),
        targets=(
            Target(includes=("/src",), excludes=("__pycache__", ".*")),
        ),
    )


@pytest.fixture
def write_files(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """
    Return a helper that materializes {relative_path: content} under tmp_path.

    Values that are not strings are dumped as JSON, which keeps key-file
    fixtures readable.
    """
    def _write(files: Dict[str, Any]) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if not isinstance(content, str):
                content = json.dumps(content, ensure_ascii=False, indent=2) + "\n"
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _write
