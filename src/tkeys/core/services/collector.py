from __future__ import annotations

"""
Key Collection Service (collect).

Scans every workspace of every target and merges the discovered keys into
the per-language key files. Collection is purely additive: keys no longer
found in the sources are kept (pruning belongs to clean) and human-entered
values are never replaced by placeholders.
"""

import logging
import os
from typing import Dict, List, Optional

from tkeys.core.analysis.key_scanner import scan_file
from tkeys.core.services.workspaces import (
    list_source_files,
    output_dir_for,
    resolve_target_workspaces,
)
from tkeys.domain.config import Config
from tkeys.domain.report_models import RunReport
from tkeys.infra.fs import (
    TranslationMap,
    dump_translation_map,
    read_translation_map,
    translation_file_path,
    write_text_if_changed,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def run_collect(config: Config, root: str = ".") -> RunReport:
    """
    Execute the collect command.

    Args:
        config: Validated configuration.
        root: Project root the target includes are relative to.

    Returns:
        RunReport: Files written and left unchanged.

    Raises:
        ParseError: If any scanned source fails to parse.
        TranslationFileError: If an existing key file is malformed.
    """
    report = RunReport(command="collect")
    scanned = collect_keys(config, root, report)

    for file_path, fresh in scanned.items():
        old = read_translation_map(file_path) if os.path.isfile(file_path) else {}
        merged = merge_translation_maps(fresh, old)

        if write_text_if_changed(file_path, dump_translation_map(merged)):
            logger.info(f"Updated {file_path} ({len(merged)} keys)")
            report.written_files.append(file_path)
        else:
            logger.info(f"No changes in {file_path}")
            report.unchanged_files.append(file_path)

    return report


def collect_keys(config: Config, root: str = ".", report: Optional[RunReport] = None) -> Dict[str, TranslationMap]:
    """
    Scan all workspaces and build the fresh per-file key maps.

    A map is created for an '<output>/<language>.json' path only once a file
    of the owning workspace yields at least one key. The default language
    maps each key to itself; other languages get a None placeholder, inserted
    on first discovery only.

    Args:
        config: Validated configuration.
        root: Project root.
        report: Optional report receiving workspace and key counters.

    Returns:
        Dict[str, TranslationMap]: Key file path to freshly scanned map.
    """
    default_lang = config.default_language
    languages = config.languages.all_languages()
    collected: Dict[str, TranslationMap] = {}

    for target, workspaces in resolve_target_workspaces(config, root):
        for workspace in workspaces:
            logger.info(f"Scanning workspace: {workspace}")
            if report is not None:
                report.workspaces += 1

            output_dir = output_dir_for(workspace, target)
            for source_path in list_source_files(workspace):
                keys = scan_file(source_path, target.fn_names)
                if not keys:
                    continue
                if report is not None:
                    report.keys_found += len(keys)

                for lang in languages:
                    mapping = collected.setdefault(translation_file_path(output_dir, lang), {})
                    _insert_keys(mapping, keys, is_default=lang == default_lang)

    return collected


def merge_translation_maps(scanned: TranslationMap, old: TranslationMap) -> TranslationMap:
    """
    Reconcile a freshly scanned map with the map already on disk.

    - Keys in both keep the scanned position; a non-null old value wins.
    - Keys only in the old map are appended with their old value.

    Args:
        scanned: Map built by the scan pass.
        old: Map loaded from the existing key file.

    Returns:
        TranslationMap: The merged map (inputs are not modified).
    """
    merged: TranslationMap = dict(scanned)
    for key, value in old.items():
        if key in merged:
            if value is not None:
                merged[key] = value
        else:
            merged[key] = value
    return merged


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _insert_keys(mapping: TranslationMap, keys: List[str], is_default: bool) -> None:
    for key in keys:
        if is_default:
            mapping[key] = key
        else:
            mapping.setdefault(key, None)
