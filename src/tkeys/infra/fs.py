from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Reads and writes the per-language key files (insertion-ordered JSON
objects) and provides the change-aware write primitive shared by every
command. Missing parent directories are created on demand.
"""

import json
import os
from typing import Any, Dict, Optional

from tkeys.domain.errors import OutputEncodingError, TranslationFileError

# Insertion-ordered key -> value (None marks a placeholder awaiting translation)
TranslationMap = Dict[str, Optional[str]]

JSON_INDENT = 2


# -----------------------------------------------------------------------------
# KEY FILE API
# -----------------------------------------------------------------------------

def translation_file_path(output_dir: str, language: str) -> str:
    """Path of the key file for one language inside an output directory."""
    return os.path.join(output_dir, f"{language}.json")


def read_translation_map(path: str) -> TranslationMap:
    """
    Load a key file, preserving key order.

    Args:
        path: Key file to read.

    Returns:
        TranslationMap: The decoded map.

    Raises:
        TranslationFileError: If the content is not UTF-8 or not a JSON object
                              of strings or nulls.
        OSError: If the file cannot be read.
    """
    with open(path, "rb") as f:
        raw = f.read()
    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TranslationFileError(path, str(e)) from e
    return parse_translation_map(content, path)


def parse_translation_map(content: str, path: str = "<memory>") -> TranslationMap:
    """
    Decode and validate the text of a key file.

    Args:
        content: Raw JSON text.
        path: Name used in diagnostics.

    Returns:
        TranslationMap: The decoded map.

    Raises:
        TranslationFileError: On invalid JSON or a non-flat shape.
    """
    try:
        data: Any = json.loads(content)
    except json.JSONDecodeError as e:
        raise TranslationFileError(path, str(e)) from e

    if not isinstance(data, dict):
        raise TranslationFileError(path, f"expected a JSON object, found {type(data).__name__}")

    for key, value in data.items():
        if value is not None and not isinstance(value, str):
            raise TranslationFileError(
                path, f"value of '{key}' must be a string or null, found {type(value).__name__}"
            )
    return data


def dump_translation_map(mapping: TranslationMap) -> str:
    """Serialize a key map as stable, pretty-printed JSON."""
    return json.dumps(mapping, ensure_ascii=False, indent=JSON_INDENT) + "\n"


# -----------------------------------------------------------------------------
# WRITE PRIMITIVES
# -----------------------------------------------------------------------------

def write_text_if_changed(path: str, content: str) -> bool:
    """
    Write a text file only when its content differs from what is on disk.

    Args:
        path: Target file.
        content: Full new content.

    Returns:
        bool: True if the file was written.
    """
    if os.path.isfile(path):
        # Undecodable bytes can never equal the new content
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            if f.read() == content:
                return False
    write_text(path, content)
    return True


def write_text(path: str, content: str) -> None:
    """
    Unconditionally write a UTF-8 text file, creating parent directories.

    The content is written to a sibling temporary file first and moved into
    place, so readers never observe a half-written file. The temporary file
    is removed if the write fails.

    Raises:
        OutputEncodingError: If the content cannot be encoded as UTF-8.
        OSError: If the file cannot be written.
    """
    try:
        data = content.encode("utf-8")
    except UnicodeEncodeError as e:
        raise OutputEncodingError(path, str(e)) from e

    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)

    tmp_path = f"{path}.tmp"
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
