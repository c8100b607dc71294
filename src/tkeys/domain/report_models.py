from __future__ import annotations

"""
Run Report Data Models.

Defines the result object each command returns to the interface layer,
mirroring what was touched on disk during the run.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class RunReport:
    """
    Summary of a single command execution.

    Attributes:
        command: Command name (collect, clean, generate).
        written_files: Files whose content was (re)written.
        unchanged_files: Files left untouched because nothing changed.
        skipped_files: Files ignored because they could not be read as key maps.
        workspaces: Number of workspaces visited.
        keys_found: Keys discovered by scanning (with repetitions).
        keys_removed: Keys pruned from key files.
        values_filled: Default-language placeholders filled with their key.
    """
    command: str
    written_files: List[str] = field(default_factory=list)
    unchanged_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)
    workspaces: int = 0
    keys_found: int = 0
    keys_removed: int = 0
    values_filled: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.written_files)
