from __future__ import annotations

"""
Workspace Discovery Service.

Resolves the directories ("workspaces") a target scans, and lists the
source files of a single workspace. A workspace is scanned one level deep;
its sub-directories are workspaces of their own when they survive the
exclusion rules.
"""

import logging
import os
from typing import List, Set, Tuple

from tkeys.core.analysis.key_scanner import is_target_file
from tkeys.core.pipeline.components.filters import compile_patterns, matches_any
from tkeys.domain.config import Config, Target

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API (DISCOVERY SERVICES)
# ==============================================================================

def resolve_workspaces(root: str, includes: List[str], excludes: List[str]) -> List[str]:
    """
    Collect every directory under the include roots that is not excluded.

    Leading '/', '.' and '\\' characters of an include are stripped so that
    '/src' and './src' both address '<root>/src'. Includes that do not exist
    are skipped. Excluded directories are pruned with their whole subtree and
    symlinked directories are never followed.

    Args:
        root: Project root the includes are relative to.
        includes: Include directories.
        excludes: Gitignore-style exclusion globs.

    Returns:
        List[str]: Unique workspace paths sorted case-insensitively.

    Raises:
        PatternError: If an exclusion glob cannot be compiled.
        OSError: If a directory cannot be listed.
    """
    exclude_rules = compile_patterns(list(excludes))
    workspaces: Set[str] = set()

    for include in includes:
        include_path = os.path.normpath(os.path.join(root, include.lstrip("/.\\")))
        if not os.path.isdir(include_path):
            logger.debug(f"Include '{include}' does not resolve to a directory, skipping.")
            continue

        for current, dirs, _ in os.walk(include_path, topdown=True, onerror=_raise_walk_error):
            workspaces.add(current)

            kept = []
            for d in dirs:
                rel_path = os.path.relpath(os.path.join(current, d), include_path).replace(os.sep, "/")
                if matches_any(d, rel_path, exclude_rules):
                    continue
                if os.path.islink(os.path.join(current, d)):
                    continue
                kept.append(d)
            dirs[:] = kept

    return sorted(workspaces, key=lambda p: p.lower())


def resolve_target_workspaces(config: Config, root: str = ".") -> List[Tuple[Target, List[str]]]:
    """
    Resolve the workspaces of every target, keeping configuration order.

    Args:
        config: Validated configuration.
        root: Project root.

    Returns:
        List[Tuple[Target, List[str]]]: Each target with its sorted workspaces.
    """
    resolved: List[Tuple[Target, List[str]]] = []
    for target in config.targets:
        workspaces = resolve_workspaces(root, list(target.includes), list(target.excludes))
        logger.debug(f"Target {list(target.includes)} resolved to {len(workspaces)} workspace(s)")
        resolved.append((target, workspaces))
    return resolved


def list_source_files(workspace: str) -> List[str]:
    """
    List the scannable files directly inside a workspace.

    Args:
        workspace: Workspace directory.

    Returns:
        List[str]: File paths sorted case-insensitively.
    """
    files: List[str] = []
    with os.scandir(workspace) as entries:
        for entry in entries:
            if entry.is_file() and is_target_file(entry.name):
                files.append(entry.path)
    return sorted(files, key=lambda p: p.lower())


def output_dir_for(workspace: str, target: Target) -> str:
    """Directory holding a workspace's key files for the given target."""
    return os.path.join(workspace, target.output)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _raise_walk_error(error: OSError) -> None:
    raise error
