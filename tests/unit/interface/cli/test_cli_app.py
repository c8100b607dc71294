from __future__ import annotations

"""
Unit tests for the CLI application controller.

Runs the in-process entry point against a temporary project and checks
exit codes, stream output and the JSON report rendering.
"""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from tkeys.infra.logging import shutdown_logging
from tkeys.interface.cli.app import main, run_steps

CONFIG_SOURCE = """
config = {
    "languages": {"name": "en", "children": [{"name": "fr"}]},
    "targets": [{"includes": ["/src"], "excludes": ["__pycache__", ".*"]}],
}
__default__ = config
"""


@pytest.fixture(autouse=True)
def restore_logging():
    level = logging.getLogger().level
    yield
    shutdown_logging()
    logging.getLogger().setLevel(level)


@pytest.fixture
def project(write_files, monkeypatch) -> Path:
    root = write_files({
        "t_config.py": CONFIG_SOURCE,
        "src/app.py": 'print(t("greeting"))\n',
    })
    monkeypatch.chdir(root)
    return root


def test_collect_success(project: Path, capsys) -> None:
    assert main(["collect"]) == 0

    out = capsys.readouterr().out
    assert "Collected successfully" in out
    assert (project / "src" / "_t" / "en.json").is_file()


def test_gc_runs_all_steps(project: Path, capsys) -> None:
    assert main(["gc"]) == 0

    out = capsys.readouterr().out
    assert "[collect]" in out
    assert "[generate]" in out
    assert "[clean]" in out
    assert "Collected, generated and cleaned successfully" in out
    assert (project / "src" / "_t" / "index.py").is_file()


def test_json_output(project: Path, capsys) -> None:
    assert main(["cg", "--json"]) == 0

    reports = json.loads(capsys.readouterr().out)
    assert [r["command"] for r in reports] == ["collect", "generate"]
    assert reports[0]["keys_found"] == 1


def test_missing_config_fails(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)

    assert main(["collect"]) == 1
    assert "ERROR:" in capsys.readouterr().err


def test_parse_error_fails(project: Path, capsys) -> None:
    (project / "src" / "bad.py").write_text("def (:\n", encoding="utf-8")

    assert main(["collect"]) == 1
    assert "bad.py" in capsys.readouterr().err


def test_keyboard_interrupt_returns_130(project: Path) -> None:
    with patch("tkeys.interface.cli.app.load_config", side_effect=KeyboardInterrupt):
        assert main(["collect"]) == 130


def test_init_creates_and_keeps(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)

    assert main(["init"]) == 0
    assert (tmp_path / "t_config.py").is_file()
    assert "created" in capsys.readouterr().out

    assert main(["init"]) == 0
    assert "already exists" in capsys.readouterr().out


def test_run_steps_returns_report_per_step(project: Path, en_fr_config) -> None:
    reports = run_steps(en_fr_config, ["collect", "clean"], root=str(project))

    assert [r.command for r in reports] == ["collect", "clean"]
