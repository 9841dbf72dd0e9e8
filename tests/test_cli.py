# SPDX-License-Identifier: MIT
"""Tests for the command-line interface."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

import warmstart.cli.main as cli
from warmstart.core.store import CacheStore


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    """Keep logfire configuration from the CLI out of the test session."""

    monkeypatch.setattr(cli, "init_logfire", lambda *a, **k: None)


@pytest.fixture()
def project(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    root = tmp_path / "root"
    (root / "python").mkdir(parents=True)
    (root / "python" / "wsdemo_cli.py").write_text("GREETING = 'hi'\n", encoding="utf-8")
    script = tmp_path / "script.py"
    script.write_text(
        "import sys\nimport wsdemo_cli\nprint(wsdemo_cli.GREETING, *sys.argv[1:])\n",
        encoding="utf-8",
    )
    return tmp_path


def _run(project: Path, *extra: str) -> int:
    return cli.main(
        [
            "run",
            "--cache-dir",
            str(project / "cache"),
            "--root",
            str(project / "root"),
            *extra,
            str(project / "script.py"),
            "world",
        ]
    )


def test_run_executes_script_and_persists(project: Path, capsys) -> None:
    assert _run(project) == 0
    assert "hi world" in capsys.readouterr().out
    stored = CacheStore(project / "cache" / "modcache").load()
    assert list(stored) == ["wsdemo_cli"]


def test_run_profile_and_log(project: Path, capsys) -> None:
    _run(project)
    sys.modules.pop("wsdemo_cli", None)
    capsys.readouterr()

    _run(project, "--profile", "--log")

    out = capsys.readouterr().out
    assert "wsdemo_cli" in out
    assert "Total cache:" in out
    assert "warmstart" in out


def test_inspect_json(project: Path, capsys) -> None:
    _run(project)
    capsys.readouterr()
    assert cli.main(["inspect", "--cache-dir", str(project / "cache"), "--json"]) == 0
    reports = json.loads(capsys.readouterr().out)
    assert [(r["name"], r["status"]) for r in reports] == [("wsdemo_cli", "fresh")]


def test_clear_removes_store(project: Path, capsys) -> None:
    _run(project)
    store = project / "cache" / "modcache"
    assert store.exists()
    assert cli.main(["clear", "--cache-dir", str(project / "cache")]) == 0
    assert not store.exists()


def test_no_command_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 1
    assert "usage" in capsys.readouterr().out


def test_version(capsys) -> None:
    assert cli.main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("warmstart ")


def test_apply_args_to_settings(settings) -> None:
    args = cli._build_parser().parse_args(
        ["run", "--root", "/a", "--root", "/b", "--no-reduced-search", "s.py"]
    )
    cli._apply_args_to_settings(args, settings)
    assert settings.runtime_path == [Path("/a"), Path("/b")]
    assert settings.reduced_search is False


def test_cli_package_exposes_main_module() -> None:
    import warmstart.cli

    assert warmstart.cli.main is cli
    assert callable(cli.main)


def test_clear_failure_exits_nonzero(project: Path, monkeypatch, capsys) -> None:
    _run(project)

    def fail(self, missing_ok: bool = False) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "unlink", fail)
    assert cli.main(["clear", "--cache-dir", str(project / "cache")]) == 1
    assert "Cannot delete" in capsys.readouterr().err
