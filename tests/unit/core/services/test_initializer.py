from __future__ import annotations

"""
Unit tests for configuration scaffolding (init).
"""

from pathlib import Path

from tkeys.core.analysis.config_evaluator import load_config
from tkeys.core.services.initializer import generate_config_file, load_config_template


def test_template_is_a_loadable_configuration(tmp_path: Path) -> None:
    path = tmp_path / "t_config.py"

    assert generate_config_file(str(path)) is True

    config = load_config(str(path))
    assert config.default_language == "en"
    assert config.languages.all_languages() == ["en", "zh"]
    assert config.targets[0].output == "_t"


def test_existing_file_is_kept_without_force(tmp_path: Path) -> None:
    path = tmp_path / "t_config.py"
    path.write_text("# mine\n", encoding="utf-8")

    assert generate_config_file(str(path)) is False
    assert path.read_text(encoding="utf-8") == "# mine\n"


def test_force_overwrites(tmp_path: Path) -> None:
    path = tmp_path / "t_config.py"
    path.write_text("# mine\n", encoding="utf-8")

    assert generate_config_file(str(path), force=True) is True
    assert path.read_text(encoding="utf-8") == load_config_template()


def test_parent_directories_are_created(tmp_path: Path) -> None:
    path = tmp_path / "config" / "nested" / "t.py"
    assert generate_config_file(str(path)) is True
    assert path.is_file()
