from __future__ import annotations

"""
Unit tests for the clean command.
"""

import json
from pathlib import Path

from tkeys.core.services.pruner import prune_translation_map, run_clean


def _load(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def test_prune_keeps_existing_order() -> None:
    pruned, removed, filled = prune_translation_map(
        {"z": "Z", "unused": "U", "a": "A"}, {"a", "z"}, fill_defaults=False
    )

    assert list(pruned) == ["z", "a"]
    assert (removed, filled) == (1, 0)


def test_prune_fills_default_language_placeholders() -> None:
    pruned, removed, filled = prune_translation_map({"k": None, "j": "J"}, {"k", "j"}, fill_defaults=True)

    assert pruned == {"k": "k", "j": "J"}
    assert (removed, filled) == (0, 1)


def test_prune_keeps_placeholders_for_other_languages() -> None:
    pruned, _, filled = prune_translation_map({"k": None}, {"k"}, fill_defaults=False)
    assert pruned == {"k": None}
    assert filled == 0


def test_run_clean_removes_unused_keys(write_files, en_fr_config) -> None:
    root = write_files({
        "src/app.py": 't("greeting")',
        "src/_t/en.json": {"greeting": "Hello", "farewell": "Bye"},
        "src/_t/fr.json": {"farewell": "Au revoir", "greeting": "Bonjour"},
    })

    report = run_clean(en_fr_config, str(root))

    assert _load(root / "src" / "_t" / "en.json") == {"greeting": "Hello"}
    assert _load(root / "src" / "_t" / "fr.json") == {"greeting": "Bonjour"}
    assert report.keys_removed == 2
    assert len(report.written_files) == 2


def test_run_clean_unchanged_file_is_not_rewritten(write_files, en_fr_config) -> None:
    root = write_files({
        "src/app.py": 't("greeting")',
        "src/_t/en.json": '{"greeting":"Hello"}',
    })

    report = run_clean(en_fr_config, str(root))

    assert (root / "src" / "_t" / "en.json").read_text(encoding="utf-8") == '{"greeting":"Hello"}'
    assert report.changed is False
    assert len(report.unchanged_files) == 1


def test_run_clean_fills_default_placeholders_on_disk(write_files, en_fr_config) -> None:
    root = write_files({
        "src/app.py": 't("k")',
        "src/_t/en.json": {"k": None},
        "src/_t/fr.json": {"k": None},
    })

    report = run_clean(en_fr_config, str(root))

    assert _load(root / "src" / "_t" / "en.json") == {"k": "k"}
    assert _load(root / "src" / "_t" / "fr.json") == {"k": None}
    assert report.values_filled == 1


def test_run_clean_scopes_used_keys_per_output_directory(write_files, en_fr_config) -> None:
    """A key used in one workspace does not keep it alive in another's files."""
    root = write_files({
        "src/app.py": 't("shared")',
        "src/feature/view.py": 't("local")',
        "src/feature/_t/en.json": {"local": "Local", "shared": "Shared"},
    })

    run_clean(en_fr_config, str(root))

    assert _load(root / "src" / "feature" / "_t" / "en.json") == {"local": "Local"}


def test_run_clean_skips_malformed_files(write_files, en_fr_config, caplog) -> None:
    root = write_files({
        "src/app.py": 't("a")',
        "src/_t/en.json": "[broken",
        "src/_t/fr.json": {"a": "A", "b": "B"},
    })

    with caplog.at_level("WARNING"):
        report = run_clean(en_fr_config, str(root))

    assert (root / "src" / "_t" / "en.json").read_text(encoding="utf-8") == "[broken"
    assert _load(root / "src" / "_t" / "fr.json") == {"a": "A"}
    assert len(report.skipped_files) == 1
    assert "Skip invalid JSON" in caplog.text


def test_run_clean_workspace_without_sources_empties_files(write_files, en_fr_config) -> None:
    root = write_files({
        "src/app.py": "",
        "src/_t/en.json": {"gone": "Gone"},
    })

    run_clean(en_fr_config, str(root))

    assert _load(root / "src" / "_t" / "en.json") == {}


def test_run_clean_skips_non_utf8_files(write_files, en_fr_config) -> None:
    root = write_files({
        "src/app.py": 't("k")',
        "src/_t/en.json": {"k": "K", "gone": "Gone"},
    })
    fr = root / "src" / "_t" / "fr.json"
    fr.write_bytes(b'{"k": "\xff\xfe"}')

    report = run_clean(en_fr_config, str(root))

    assert report.skipped_files == [str(fr)]
    assert fr.read_bytes() == b'{"k": "\xff\xfe"}'
    assert _load(root / "src" / "_t" / "en.json") == {"k": "K"}
