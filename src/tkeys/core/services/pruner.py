from __future__ import annotations

"""
Unused Key Pruning Service (clean).

Rescans the sources to rebuild the used-key set of every output directory,
then filters each language file of that directory down to the used keys,
preserving the order already on disk. Default-language placeholders left
behind are filled with their own key.
"""

import logging
import os
from typing import Dict, Set, Tuple

from tkeys.core.analysis.key_scanner import scan_file
from tkeys.core.services.workspaces import (
    list_source_files,
    output_dir_for,
    resolve_target_workspaces,
)
from tkeys.domain.config import Config
from tkeys.domain.errors import TranslationFileError
from tkeys.domain.report_models import RunReport
from tkeys.infra.fs import (
    TranslationMap,
    dump_translation_map,
    read_translation_map,
    translation_file_path,
    write_text,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def run_clean(config: Config, root: str = ".") -> RunReport:
    """
    Execute the clean command.

    A key file that cannot be decoded is skipped with a warning; every
    other failure aborts the run.

    Args:
        config: Validated configuration.
        root: Project root the target includes are relative to.

    Returns:
        RunReport: Files written, unchanged and skipped, plus prune counters.
    """
    report = RunReport(command="clean")
    resolved = resolve_target_workspaces(config, root)

    used: Dict[str, Set[str]] = {}
    for target, workspaces in resolved:
        for workspace in workspaces:
            logger.info(f"Scanning workspace for used keys: {workspace}")
            report.workspaces += 1
            keys = used.setdefault(output_dir_for(workspace, target), set())
            for source_path in list_source_files(workspace):
                found = scan_file(source_path, target.fn_names)
                report.keys_found += len(found)
                keys.update(found)

    logger.debug(f"Total used keys (all output directories): {sum(len(s) for s in used.values())}")

    default_lang = config.default_language
    languages = config.languages.all_languages()
    visited: Set[str] = set()

    for target, workspaces in resolved:
        for workspace in workspaces:
            output_dir = output_dir_for(workspace, target)
            if output_dir in visited:
                continue
            visited.add(output_dir)

            used_keys = used.get(output_dir, set())
            for lang in languages:
                file_path = translation_file_path(output_dir, lang)
                if os.path.isfile(file_path):
                    _clean_file(file_path, used_keys, lang == default_lang, report)

    return report


def prune_translation_map(
        mapping: TranslationMap,
        used_keys: Set[str],
        fill_defaults: bool,
) -> Tuple[TranslationMap, int, int]:
    """
    Keep only used keys, in their existing order.

    Args:
        mapping: Map loaded from disk.
        used_keys: Keys referenced by the sources of the owning workspaces.
        fill_defaults: Replace remaining None values with their key (default language).

    Returns:
        Tuple[TranslationMap, int, int]: (pruned map, keys removed, values filled).
    """
    pruned: TranslationMap = {k: v for k, v in mapping.items() if k in used_keys}
    removed = len(mapping) - len(pruned)

    filled = 0
    if fill_defaults:
        for key, value in pruned.items():
            if value is None:
                pruned[key] = key
                filled += 1

    return pruned, removed, filled


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _clean_file(file_path: str, used_keys: Set[str], is_default: bool, report: RunReport) -> None:
    try:
        old = read_translation_map(file_path)
    except TranslationFileError as e:
        logger.warning(f"Skip invalid JSON: {e}")
        report.skipped_files.append(file_path)
        return

    pruned, removed, filled = prune_translation_map(old, used_keys, is_default)

    if removed or filled:
        write_text(file_path, dump_translation_map(pruned))
        logger.info(
            f"Cleaned {file_path}: removed {removed} unused keys, "
            f"filled {filled} ({len(old)} -> {len(pruned)})"
        )
        report.written_files.append(file_path)
        report.keys_removed += removed
        report.values_filled += filled
    else:
        logger.info(f"No unused keys in {file_path}")
        report.unchanged_files.append(file_path)
