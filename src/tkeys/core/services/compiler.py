from __future__ import annotations

"""
Hierarchical Dictionary Compiler (generate).

Resolves every language of the inheritance tree against its ancestors and
renders the result as a typed Python module ('<output>/index.py') that the
application imports at runtime. Each language starts from a copy of its
parent's resolved map and overlays its own non-null values, so untranslated
keys fall back along the ancestor chain.
"""

import json
import keyword
import logging
import os
import re
from typing import Dict, List, Set

from tkeys.core.services.workspaces import output_dir_for, resolve_target_workspaces
from tkeys.domain.config import Config, LanguageNode
from tkeys.domain.report_models import RunReport
from tkeys.infra.fs import read_translation_map, translation_file_path, write_text

logger = logging.getLogger(__name__)

ARTIFACT_NAME = "index.py"
UNION_ALIAS = "Dict"

ResolvedMap = Dict[str, str]

_NON_IDENTIFIER = re.compile(r"\W")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def run_generate(config: Config, root: str = ".") -> RunReport:
    """
    Execute the generate command.

    Workspaces whose output directory does not exist are skipped. The
    artifact of every other workspace is rewritten unconditionally.

    Args:
        config: Validated configuration.
        root: Project root the target includes are relative to.

    Returns:
        RunReport: Generated artifacts.

    Raises:
        TranslationFileError: If a key file is malformed.
    """
    report = RunReport(command="generate")

    for target, workspaces in resolve_target_workspaces(config, root):
        for workspace in workspaces:
            output_dir = output_dir_for(workspace, target)
            if not os.path.isdir(output_dir):
                continue
            report.workspaces += 1

            resolved = resolve_language_maps(config.languages, output_dir)
            artifact_path = os.path.join(output_dir, ARTIFACT_NAME)
            write_text(artifact_path, render_dictionary_module(target.output, resolved))

            logger.info(f"Generated: {artifact_path}")
            report.written_files.append(artifact_path)

    return report


def resolve_language_maps(languages: LanguageNode, output_dir: str) -> Dict[str, ResolvedMap]:
    """
    Resolve each language's map against its ancestors.

    Args:
        languages: Root of the language tree.
        output_dir: Directory holding the '<language>.json' files.

    Returns:
        Dict[str, ResolvedMap]: Language to fully resolved map, in pre-order.
    """
    resolved: Dict[str, ResolvedMap] = {}

    for lang, parent in languages.walk():
        data: ResolvedMap = dict(resolved.get(parent, {})) if parent is not None else {}

        file_path = translation_file_path(output_dir, lang)
        if os.path.isfile(file_path):
            for key, value in read_translation_map(file_path).items():
                if value is not None:
                    data[key] = value
        else:
            logger.debug(f"No key file for '{lang}' in {output_dir}; inheriting only.")

        resolved[lang] = data

    return resolved


def render_dictionary_module(output_name: str, resolved: Dict[str, ResolvedMap]) -> str:
    """
    Render the compiled dictionaries as an importable, typed Python module.

    The module exports one TypedDict per language (values typed as string
    Literals), a 'Dict' union of those types, and a constant named after the
    output directory holding the nested {language: {key: value}} mapping.

    Args:
        output_name: Output directory name, used as the constant's name.
        resolved: Resolved maps keyed by language.

    Returns:
        str: Module source.
    """
    const_name = to_identifier(output_name)
    type_names = _language_type_names(list(resolved))

    lines: List[str] = [
        "# Generated by tkeys. Do not edit by hand.",
        "from __future__ import annotations",
        "",
        "from typing import Final, Literal, Mapping, TypedDict, Union",
        "",
    ]

    for lang, mapping in resolved.items():
        lines.append(f"{type_names[lang]} = TypedDict({_literal(type_names[lang])}, {{")
        for key, value in mapping.items():
            lines.append(f"    {_literal(key)}: Literal[{_literal(value)}],")
        lines.append("})")
        lines.append("")

    members = ", ".join(type_names[lang] for lang in resolved)
    lines.append(f"{UNION_ALIAS} = Union[{members}]")
    lines.append("")

    body = json.dumps(resolved, ensure_ascii=False, indent=4)
    lines.append(f"{const_name}: Final[Mapping[str, {UNION_ALIAS}]] = {body}")
    lines.append("")

    return "\n".join(lines)


def to_identifier(name: str) -> str:
    """Turn an arbitrary name into a valid, non-keyword Python identifier."""
    ident = _NON_IDENTIFIER.sub("_", name) or "_"
    if ident[0].isdigit():
        ident = f"_{ident}"
    if keyword.iskeyword(ident):
        ident = f"{ident}_"
    return ident


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _language_type_names(languages: List[str]) -> Dict[str, str]:
    names: Dict[str, str] = {}
    taken: Set[str] = set()
    for lang in languages:
        base = f"{UNION_ALIAS}_{to_identifier(lang).lstrip('_')}"
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}_{suffix}"
            suffix += 1
        taken.add(candidate)
        names[lang] = candidate
    return names


def _literal(text: str) -> str:
    """Python string literal for text (JSON string syntax is valid Python)."""
    return json.dumps(text, ensure_ascii=False)
